from __future__ import annotations

from .constants import ENTER
from .models import EditorConfig, Highlight, Key, KeyEvent
from .rows import row_rx_to_cx

FORWARD_KEYS = (Key.ARROW_RIGHT, Key.ARROW_DOWN)
BACKWARD_KEYS = (Key.ARROW_LEFT, Key.ARROW_UP)


def restore_hl(config: EditorConfig) -> None:
    search = config.search
    saved = search.saved_hl
    if saved is not None and 0 <= search.saved_hl_line < config.numrows:
        row = config.rows[search.saved_hl_line]
        # An edit since the snapshot would make it stale.
        if len(row.hl) == len(saved):
            row.hl = saved
    search.saved_hl = None
    search.saved_hl_line = -1


def highlight_match(config: EditorConfig, idx: int, offset: int, length: int) -> None:
    row = config.rows[idx]
    config.search.saved_hl_line = idx
    config.search.saved_hl = row.hl.copy()
    for i in range(offset, min(offset + length, row.rsize)):
        row.hl[i] = Highlight.MATCH


def find_next_match(config: EditorConfig, query: str) -> tuple[int, int] | None:
    step = 1 if config.search.forward else -1
    current = config.search.last_match
    for _ in range(config.numrows):
        current += step
        if current == -1:
            current = config.numrows - 1
        elif current == config.numrows:
            current = 0
        offset = config.rows[current].render.find(query)
        if offset != -1:
            return current, offset
    return None


def find_callback(config: EditorConfig, query: str, key: KeyEvent) -> tuple[int, int] | None:
    """Advance the incremental search after ``key`` changed ``query``.

    Returns the (row, raw column) the cursor was moved to, or None.
    """
    search = config.search
    restore_hl(config)

    if key in (ENTER, Key.ESCAPE):
        search.reset()
        return None
    if key in FORWARD_KEYS:
        search.forward = True
    elif key in BACKWARD_KEYS:
        search.forward = False
    else:
        search.reset()

    if search.last_match == -1:
        search.forward = True
    if not query:
        return None

    match = find_next_match(config, query)
    if match is None:
        return None

    idx, offset = match
    row = config.rows[idx]
    search.last_match = idx
    config.cy = idx
    config.cx = row_rx_to_cx(row, offset, config.tab_stop)
    # Scroll past the end so the next refresh brings the match to the top.
    config.rowoff = config.numrows
    highlight_match(config, idx, offset, len(query))
    return idx, config.cx
