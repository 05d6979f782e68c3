from __future__ import annotations

import logging
import os

from .constants import (
    C_HL_EXTENSIONS,
    C_HL_KEYWORDS,
    C_HL_TYPES,
    GO_HL_EXTENSIONS,
    GO_HL_KEYWORDS,
    GO_HL_TYPES,
    HL_HIGHLIGHT_NUMBERS,
    HL_HIGHLIGHT_STRINGS,
    PY_HL_EXTENSIONS,
    PY_HL_KEYWORDS,
    PY_HL_TYPES,
    SEPARATORS,
)
from .models import EditorConfig, EditorSyntax, Highlight, Keyword, KeywordClass, Row

logger = logging.getLogger(__name__)


def keywords(primary: tuple[str, ...], secondary: tuple[str, ...]) -> tuple[Keyword, ...]:
    return tuple(Keyword(kw) for kw in primary) + tuple(
        Keyword(kw, KeywordClass.SECONDARY) for kw in secondary
    )


HLDB: tuple[EditorSyntax, ...] = (
    EditorSyntax(
        filetype="c",
        filematch=C_HL_EXTENSIONS,
        keywords=keywords(C_HL_KEYWORDS, C_HL_TYPES),
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HL_HIGHLIGHT_STRINGS | HL_HIGHLIGHT_NUMBERS,
    ),
    EditorSyntax(
        filetype="go",
        filematch=GO_HL_EXTENSIONS,
        keywords=keywords(GO_HL_KEYWORDS, GO_HL_TYPES),
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HL_HIGHLIGHT_STRINGS | HL_HIGHLIGHT_NUMBERS,
    ),
    EditorSyntax(
        filetype="python",
        filematch=PY_HL_EXTENSIONS,
        keywords=keywords(PY_HL_KEYWORDS, PY_HL_TYPES),
        singleline_comment_start="#",
        multiline_comment_start="",
        multiline_comment_end="",
        flags=HL_HIGHLIGHT_STRINGS | HL_HIGHLIGHT_NUMBERS,
    ),
)


def is_separator(c: str) -> bool:
    return c == " " or c == "\0" or c in SEPARATORS


def syntax_to_color(hl: Highlight) -> int:
    if hl in (Highlight.COMMENT, Highlight.MLCOMMENT):
        return 36
    if hl == Highlight.KEYWORD1:
        return 33
    if hl == Highlight.KEYWORD2:
        return 32
    if hl == Highlight.STRING:
        return 35
    if hl == Highlight.NUMBER:
        return 31
    if hl == Highlight.MATCH:
        return 34
    return 37


def find_syntax(
    filename: str, registry: tuple[EditorSyntax, ...] = HLDB
) -> EditorSyntax | None:
    ext = os.path.splitext(filename)[1]
    for syntax in registry:
        for pattern in syntax.filematch:
            if pattern.startswith("."):
                if pattern == ext:
                    return syntax
            elif pattern in filename:
                return syntax
    return None


def select_syntax_highlight(
    config: EditorConfig, filename: str, registry: tuple[EditorSyntax, ...] = HLDB
) -> None:
    config.syntax = find_syntax(filename, registry)
    logger.debug(
        "syntax for %r: %s", filename, config.syntax.filetype if config.syntax else "none"
    )
    for row in config.rows:
        update_syntax(config, row.idx, cascade=False)


def highlight_row(row: Row, syntax: EditorSyntax | None, in_comment: bool) -> bool:
    """Tag every rendered character of ``row`` and return the open-comment state at its end.

    ``in_comment`` is the open-comment flag of the preceding row.
    """
    p = row.render
    hl = [Highlight.NORMAL] * len(p)
    row.hl = hl
    if syntax is None:
        return False

    scs = syntax.singleline_comment_start
    mcs = syntax.multiline_comment_start
    mce = syntax.multiline_comment_end
    block_comments = bool(mcs and mce)
    strings = bool(syntax.flags & HL_HIGHLIGHT_STRINGS)
    numbers = bool(syntax.flags & HL_HIGHLIGHT_NUMBERS)

    prev_sep = True
    in_string = ""
    i = 0
    while i < len(p):
        ch = p[i]
        prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

        if scs and not in_string and not in_comment and p.startswith(scs, i):
            hl[i:] = [Highlight.COMMENT] * (len(p) - i)
            break

        if block_comments and not in_string:
            if in_comment:
                if p.startswith(mce, i):
                    hl[i : i + len(mce)] = [Highlight.MLCOMMENT] * len(mce)
                    i += len(mce)
                    in_comment = False
                    prev_sep = True
                    continue
                hl[i] = Highlight.MLCOMMENT
                i += 1
                continue
            if p.startswith(mcs, i):
                hl[i : i + len(mcs)] = [Highlight.MLCOMMENT] * len(mcs)
                i += len(mcs)
                in_comment = True
                continue

        if strings:
            if in_string:
                hl[i] = Highlight.STRING
                if ch == "\\" and i + 1 < len(p):
                    hl[i + 1] = Highlight.STRING
                    i += 2
                    continue
                if ch == in_string:
                    in_string = ""
                i += 1
                prev_sep = True
                continue
            if ch in ('"', "'"):
                in_string = ch
                hl[i] = Highlight.STRING
                i += 1
                continue

        if numbers:
            if ("0" <= ch <= "9" and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                ch == "." and prev_hl == Highlight.NUMBER
            ):
                hl[i] = Highlight.NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = _match_keyword(p, i, syntax.keywords)
            if matched is not None:
                end = i + len(matched.text)
                hl[i:end] = [matched.highlight] * len(matched.text)
                i = end
                prev_sep = False
                continue

        prev_sep = is_separator(ch)
        i += 1

    return in_comment


def _match_keyword(p: str, i: int, kws: tuple[Keyword, ...]) -> Keyword | None:
    for kw in kws:
        if not kw.text or not p.startswith(kw.text, i):
            continue
        end = i + len(kw.text)
        if end == len(p) or is_separator(p[end]):
            return kw
    return None


def update_syntax(config: EditorConfig, idx: int, cascade: bool = True) -> None:
    """Re-highlight row ``idx`` and every following row whose predecessor flag changed.

    With ``cascade`` false only row ``idx`` is recomputed; callers that walk
    the whole document themselves use this.
    """
    while 0 <= idx < config.numrows:
        row = config.rows[idx]
        in_comment = idx > 0 and config.rows[idx - 1].hl_oc
        oc = highlight_row(row, config.syntax, in_comment)
        changed = row.hl_oc != oc
        row.hl_oc = oc
        if not (cascade and changed):
            return
        idx += 1
