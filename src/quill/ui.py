from __future__ import annotations

import os
import time
from typing import TYPE_CHECKING, Callable

from .constants import (
    CTRL_H,
    ENTER,
    QUILL_QUERY_LEN,
    QUILL_STATUS_TIMEOUT,
    QUILL_VERSION,
)
from .models import EditorConfig, Highlight, Key, KeyEvent
from .rows import row_cx_to_rx, row_visible_slice
from .search import find_callback
from .syntax import syntax_to_color
from .terminal import read_key

if TYPE_CHECKING:
    from .editor import Editor


def scroll(cfg: EditorConfig) -> None:
    cfg.rx = 0
    if cfg.cy < cfg.numrows:
        cfg.rx = row_cx_to_rx(cfg.rows[cfg.cy], cfg.cx, cfg.tab_stop)

    if cfg.cy < cfg.rowoff:
        cfg.rowoff = cfg.cy
    if cfg.cy >= cfg.rowoff + cfg.screenrows:
        cfg.rowoff = cfg.cy - cfg.screenrows + 1
    if cfg.rx < cfg.coloff:
        cfg.coloff = cfg.rx
    if cfg.rx >= cfg.coloff + cfg.screencols:
        cfg.coloff = cfg.rx - cfg.screencols + 1


def draw_rows(cfg: EditorConfig, ab: list[str]) -> None:
    for y in range(cfg.screenrows):
        filerow = cfg.rowoff + y
        if filerow >= cfg.numrows:
            if cfg.numrows == 0 and y == cfg.screenrows // 3:
                welcome = f"Quill editor -- version {QUILL_VERSION}"[: cfg.screencols]
                padding = (cfg.screencols - len(welcome)) // 2
                if padding:
                    ab.append("~")
                    padding -= 1
                if padding > 0:
                    ab.append(" " * padding)
                ab.append(welcome)
            else:
                ab.append("~")
            ab.append("\x1b[0K\r\n")
            continue

        current_color = -1
        for ch, h in row_visible_slice(cfg.rows[filerow], cfg.coloff, cfg.screencols):
            if not ch.isprintable():
                sym = chr(ord("@") + ord(ch)) if ord(ch) <= 26 else "?"
                ab.append("\x1b[7m")
                ab.append(sym)
                ab.append("\x1b[0m")
                if current_color != -1:
                    ab.append(f"\x1b[{current_color}m")
            elif h == Highlight.NORMAL:
                if current_color != -1:
                    ab.append("\x1b[39m")
                    current_color = -1
                ab.append(ch)
            else:
                color = syntax_to_color(h)
                if color != current_color:
                    ab.append(f"\x1b[{color}m")
                    current_color = color
                ab.append(ch)
        ab.append("\x1b[39m")
        ab.append("\x1b[0K")
        ab.append("\r\n")


def draw_status_bar(cfg: EditorConfig, ab: list[str]) -> None:
    ab.append("\x1b[0K")
    ab.append("\x1b[7m")
    filename = cfg.filename if cfg.filename else "[No Name]"
    status = f"{filename:.20} - {cfg.numrows} lines {'(modified)' if cfg.dirty else ''}"
    filetype = cfg.syntax.filetype if cfg.syntax else "no ft"
    rstatus = f"{filetype} | {cfg.cy + 1}/{cfg.numrows}"
    status = status[: cfg.screencols]
    ab.append(status)
    fill = len(status)
    while fill < cfg.screencols:
        if cfg.screencols - fill == len(rstatus):
            ab.append(rstatus)
            break
        ab.append(" ")
        fill += 1
    ab.append("\x1b[0m\r\n")


def draw_message_bar(cfg: EditorConfig, ab: list[str]) -> None:
    ab.append("\x1b[0K")
    if cfg.statusmsg and time.time() - cfg.statusmsg_time < QUILL_STATUS_TIMEOUT:
        ab.append(cfg.statusmsg[: cfg.screencols])


def compose_screen(cfg: EditorConfig) -> str:
    scroll(cfg)
    ab: list[str] = ["\x1b[?25l", "\x1b[H"]
    draw_rows(cfg, ab)
    draw_status_bar(cfg, ab)
    draw_message_bar(cfg, ab)
    ab.append(f"\x1b[{cfg.cy - cfg.rowoff + 1};{cfg.rx - cfg.coloff + 1}H")
    ab.append("\x1b[?25h")
    return "".join(ab)


def refresh_screen(editor: Editor) -> None:
    os.write(editor.stdout_fd, compose_screen(editor.cfg).encode(errors="replace"))


def prompt(
    editor: Editor,
    fmt: str,
    callback: Callable[[str, KeyEvent], object] | None = None,
) -> str | None:
    """Read a line in the message bar; None means the user cancelled with ESC."""
    buf = ""
    while True:
        editor.set_status_message(fmt, buf)
        editor.refresh_screen()

        c = read_key(editor.source)
        if c in (Key.DELETE, Key.BACKSPACE, CTRL_H):
            buf = buf[:-1]
        elif c == Key.ESCAPE:
            editor.set_status_message("")
            if callback is not None:
                callback(buf, c)
            return None
        elif c == ENTER:
            if buf:
                editor.set_status_message("")
                if callback is not None:
                    callback(buf, c)
                return buf
        elif isinstance(c, int) and c >= 32 and chr(c).isprintable():
            if len(buf) < QUILL_QUERY_LEN:
                buf += chr(c)

        if callback is not None:
            callback(buf, c)


def find(editor: Editor) -> None:
    cfg = editor.cfg
    saved = (cfg.cx, cfg.cy, cfg.coloff, cfg.rowoff)

    query = prompt(editor, "Search: %s (Use ESC/Arrows/Enter)", lambda q, k: find_callback(cfg, q, k))
    if query is None:
        cfg.cx, cfg.cy, cfg.coloff, cfg.rowoff = saved
