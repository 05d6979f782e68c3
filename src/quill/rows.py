from __future__ import annotations

from .models import EditorConfig, Highlight, Row
from .syntax import update_syntax


def render_chars(chars: str, tab_stop: int) -> str:
    out: list[str] = []
    idx = 0
    for ch in chars:
        if ch == "\t":
            out.append(" ")
            idx += 1
            while idx % tab_stop != 0:
                out.append(" ")
                idx += 1
        else:
            out.append(ch)
            idx += 1
    return "".join(out)


def update_row(config: EditorConfig, row: Row) -> None:
    row.render = render_chars(row.chars, config.tab_stop)
    update_syntax(config, row.idx)


def insert_row(config: EditorConfig, at: int, s: str) -> None:
    if at < 0 or at > config.numrows:
        return
    config.rows.insert(at, Row(idx=at, chars=s))
    for j in range(at + 1, config.numrows):
        config.rows[j].idx = j
    update_row(config, config.rows[at])
    # The row after the new one now has a different predecessor.
    update_syntax(config, at + 1)
    config.dirty += 1


def del_row(config: EditorConfig, at: int) -> None:
    if at < 0 or at >= config.numrows:
        return
    del config.rows[at]
    for j in range(at, config.numrows):
        config.rows[j].idx = j
    update_syntax(config, at)
    config.dirty += 1


def row_insert_char(config: EditorConfig, row: Row, at: int, c: str) -> None:
    if at < 0 or at > row.size:
        at = row.size
    row.chars = row.chars[:at] + c + row.chars[at:]
    update_row(config, row)
    config.dirty += 1


def row_append_string(config: EditorConfig, row: Row, s: str) -> None:
    row.chars += s
    update_row(config, row)
    config.dirty += 1


def row_del_char(config: EditorConfig, row: Row, at: int) -> None:
    if at < 0 or at >= row.size:
        return
    row.chars = row.chars[:at] + row.chars[at + 1 :]
    update_row(config, row)
    config.dirty += 1


def row_cx_to_rx(row: Row, cx: int, tab_stop: int) -> int:
    rx = 0
    for ch in row.chars[:cx]:
        if ch == "\t":
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


def row_rx_to_cx(row: Row, rx: int, tab_stop: int) -> int:
    cur_rx = 0
    for cx, ch in enumerate(row.chars):
        if ch == "\t":
            cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return row.size


def row_visible_slice(row: Row, coloff: int, width: int) -> list[tuple[str, Highlight]]:
    if coloff >= row.rsize or width <= 0:
        return []
    end = coloff + width
    return list(zip(row.render[coloff:end], row.hl[coloff:end]))


def rows_to_string(config: EditorConfig) -> str:
    return "".join(f"{row.chars}\n" for row in config.rows)
