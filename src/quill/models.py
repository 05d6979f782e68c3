from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Union

from .constants import QUILL_QUIT_TIMES, QUILL_TAB_STOP


class Highlight(IntEnum):
    NORMAL = 0
    COMMENT = auto()
    MLCOMMENT = auto()
    KEYWORD1 = auto()
    KEYWORD2 = auto()
    STRING = auto()
    NUMBER = auto()
    MATCH = auto()


class KeywordClass(Enum):
    PRIMARY = auto()
    SECONDARY = auto()


class Key(Enum):
    ARROW_LEFT = auto()
    ARROW_RIGHT = auto()
    ARROW_UP = auto()
    ARROW_DOWN = auto()
    DELETE = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    BACKSPACE = auto()
    ESCAPE = auto()


# A decoded key press: either a code point (printable or control) or a named key.
KeyEvent = Union[int, Key]


@dataclass(frozen=True, slots=True)
class Keyword:
    text: str
    kind: KeywordClass = KeywordClass.PRIMARY

    @property
    def highlight(self) -> Highlight:
        if self.kind is KeywordClass.SECONDARY:
            return Highlight.KEYWORD2
        return Highlight.KEYWORD1


@dataclass(frozen=True, slots=True)
class EditorSyntax:
    filetype: str
    filematch: tuple[str, ...]
    keywords: tuple[Keyword, ...]
    singleline_comment_start: str
    multiline_comment_start: str
    multiline_comment_end: str
    flags: int


@dataclass(slots=True)
class Row:
    idx: int
    chars: str
    render: str = ""
    hl: list[Highlight] = field(default_factory=list)
    hl_oc: bool = False

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)


@dataclass(slots=True)
class SearchState:
    last_match: int = -1
    forward: bool = True
    saved_hl_line: int = -1
    saved_hl: list[Highlight] | None = None

    def reset(self) -> None:
        self.last_match = -1
        self.forward = True


@dataclass(slots=True)
class EditorConfig:
    cx: int = 0
    cy: int = 0
    rx: int = 0
    rowoff: int = 0
    coloff: int = 0
    screenrows: int = 0
    screencols: int = 0
    tab_stop: int = QUILL_TAB_STOP
    rows: list[Row] = field(default_factory=list)
    dirty: int = 0
    filename: str | None = None
    statusmsg: str = ""
    statusmsg_time: float = 0.0
    syntax: EditorSyntax | None = None
    search: SearchState = field(default_factory=SearchState)
    quit_times: int = QUILL_QUIT_TIMES

    @property
    def numrows(self) -> int:
        return len(self.rows)
