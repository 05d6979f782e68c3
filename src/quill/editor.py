from __future__ import annotations

import argparse
import errno
import logging
import os
import signal
import sys
import time
from typing import Callable

from .constants import (
    CTRL_A,
    CTRL_C,
    CTRL_E,
    CTRL_F,
    CTRL_H,
    CTRL_L,
    CTRL_Q,
    CTRL_S,
    ENTER,
    QUILL_QUIT_TIMES,
    QUILL_TAB_STOP,
)
from .models import EditorConfig, EditorSyntax, Key, KeyEvent
from .rows import (
    del_row,
    insert_row,
    row_append_string,
    row_del_char,
    row_insert_char,
    rows_to_string,
    update_row,
)
from .syntax import HLDB, select_syntax_highlight
from .terminal import ByteSource, FdByteSource, RawMode, get_window_size, read_key
from .ui import find, prompt, refresh_screen

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


class QuitEditor(Exception):
    pass


class Editor:
    def __init__(
        self,
        source: ByteSource | None = None,
        stdout_fd: int = 1,
        tab_stop: int = QUILL_TAB_STOP,
        registry: tuple[EditorSyntax, ...] = HLDB,
    ) -> None:
        self.cfg = EditorConfig(tab_stop=tab_stop)
        self.source = source
        self.stdout_fd = stdout_fd
        self.registry = registry
        self.key_handlers: dict[KeyEvent, Callable[[], None]] = {
            ENTER: self.insert_newline,
            CTRL_Q: self.quit,
            CTRL_S: self.save,
            CTRL_F: self.find,
            CTRL_A: self.move_home,
            CTRL_E: self.move_end,
            CTRL_H: self.del_char,
            CTRL_C: self._noop,
            CTRL_L: self._noop,
            Key.ESCAPE: self._noop,
            Key.BACKSPACE: self.del_char,
            Key.DELETE: self.delete_forward,
            Key.HOME: self.move_home,
            Key.END: self.move_end,
            Key.PAGE_UP: self.page_up,
            Key.PAGE_DOWN: self.page_down,
            Key.ARROW_UP: lambda: self.move_cursor(Key.ARROW_UP),
            Key.ARROW_DOWN: lambda: self.move_cursor(Key.ARROW_DOWN),
            Key.ARROW_LEFT: lambda: self.move_cursor(Key.ARROW_LEFT),
            Key.ARROW_RIGHT: lambda: self.move_cursor(Key.ARROW_RIGHT),
        }

    def update_window_size(self, ifd: int) -> None:
        try:
            rows, cols = get_window_size(ifd, self.stdout_fd)
        except OSError as exc:
            raise OSError(exc.errno, "Unable to query screen size") from exc
        self.cfg.screenrows = max(1, rows - 2)
        self.cfg.screencols = max(1, cols)

    def set_status_message(self, fmt: str, *args: object) -> None:
        self.cfg.statusmsg = fmt % args if args else fmt
        self.cfg.statusmsg_time = time.time()

    def select_syntax_highlight(self, filename: str) -> None:
        select_syntax_highlight(self.cfg, filename, self.registry)

    def open_file(self, filename: str) -> None:
        self.cfg.filename = filename
        self.select_syntax_highlight(filename)
        try:
            with open(filename, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
                text = f.read()
        except FileNotFoundError:
            logger.info("%s does not exist, starting an empty document", filename)
            self.cfg.dirty = 0
            return
        except OSError as exc:
            logger.error("opening %s failed: %s", filename, exc)
            raise OSError(exc.errno, f"Opening file failed: {filename}") from exc

        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        for line in lines:
            insert_row(self.cfg, self.cfg.numrows, line)
        self.cfg.dirty = 0
        logger.info("opened %s (%d rows)", filename, self.cfg.numrows)

    def save(self) -> bool:
        if not self.cfg.filename:
            filename = prompt(self, "Save as: %s (ESC to cancel)")
            if not filename:
                self.set_status_message("Save aborted")
                return False
            self.cfg.filename = filename
            self.select_syntax_highlight(filename)

        data = rows_to_string(self.cfg).encode(ENCODING, ENCODING_ERRORS)
        try:
            with open(self.cfg.filename, "wb") as f:
                f.write(data)
        except OSError as exc:
            logger.error("saving %s failed: %s", self.cfg.filename, exc)
            self.set_status_message(
                "Can't save! I/O error: %s", os.strerror(exc.errno or errno.EIO)
            )
            return False

        self.cfg.dirty = 0
        logger.info("wrote %d bytes to %s", len(data), self.cfg.filename)
        self.set_status_message("%d bytes written on disk", len(data))
        return True

    def refresh_screen(self) -> None:
        refresh_screen(self)

    def find(self) -> None:
        find(self)

    def insert_char(self, c: int) -> None:
        cfg = self.cfg
        if cfg.cy == cfg.numrows:
            insert_row(cfg, cfg.numrows, "")
        row_insert_char(cfg, cfg.rows[cfg.cy], cfg.cx, chr(c))
        cfg.cx += 1

    def insert_newline(self) -> None:
        cfg = self.cfg
        if cfg.cy >= cfg.numrows:
            insert_row(cfg, cfg.numrows, "")
        elif cfg.cx == 0:
            insert_row(cfg, cfg.cy, "")
        else:
            row = cfg.rows[cfg.cy]
            cx = min(cfg.cx, row.size)
            insert_row(cfg, cfg.cy + 1, row.chars[cx:])
            row.chars = row.chars[:cx]
            update_row(cfg, row)
        cfg.cy += 1
        cfg.cx = 0

    def del_char(self) -> None:
        cfg = self.cfg
        if cfg.cy >= cfg.numrows or (cfg.cx == 0 and cfg.cy == 0):
            return

        row = cfg.rows[cfg.cy]
        if cfg.cx > 0:
            row_del_char(cfg, row, cfg.cx - 1)
            cfg.cx -= 1
        else:
            prev = cfg.rows[cfg.cy - 1]
            cfg.cx = prev.size
            row_append_string(cfg, prev, row.chars)
            del_row(cfg, cfg.cy)
            cfg.cy -= 1

    def delete_forward(self) -> None:
        cfg = self.cfg
        if cfg.cy >= cfg.numrows:
            return
        if cfg.cx == cfg.rows[cfg.cy].size and cfg.cy == cfg.numrows - 1:
            return
        self.move_cursor(Key.ARROW_RIGHT)
        self.del_char()

    def move_cursor(self, key: Key) -> None:
        cfg = self.cfg
        row = cfg.rows[cfg.cy] if cfg.cy < cfg.numrows else None

        if key == Key.ARROW_LEFT:
            if cfg.cx != 0:
                cfg.cx -= 1
            elif cfg.cy > 0:
                cfg.cy -= 1
                cfg.cx = cfg.rows[cfg.cy].size
        elif key == Key.ARROW_RIGHT:
            if row is not None and cfg.cx < row.size:
                cfg.cx += 1
            elif row is not None and cfg.cx == row.size:
                cfg.cy += 1
                cfg.cx = 0
        elif key == Key.ARROW_UP:
            if cfg.cy != 0:
                cfg.cy -= 1
        elif key == Key.ARROW_DOWN:
            if cfg.cy < cfg.numrows:
                cfg.cy += 1

        if cfg.cy < cfg.numrows:
            cfg.cx = min(cfg.cx, cfg.rows[cfg.cy].size)
        else:
            cfg.cx = 0

    def move_home(self) -> None:
        self.cfg.cx = 0

    def move_end(self) -> None:
        if self.cfg.cy < self.cfg.numrows:
            self.cfg.cx = self.cfg.rows[self.cfg.cy].size

    def page_up(self) -> None:
        self.cfg.cy = self.cfg.rowoff
        for _ in range(self.cfg.screenrows):
            self.move_cursor(Key.ARROW_UP)

    def page_down(self) -> None:
        cfg = self.cfg
        cfg.cy = min(cfg.rowoff + cfg.screenrows - 1, cfg.numrows)
        for _ in range(cfg.screenrows):
            self.move_cursor(Key.ARROW_DOWN)

    def quit(self) -> None:
        if self.cfg.dirty and self.cfg.quit_times > 0:
            self.set_status_message(
                "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit.",
                self.cfg.quit_times,
            )
            self.cfg.quit_times -= 1
            return
        raise QuitEditor()

    def _noop(self) -> None:
        return

    def handle_key(self, c: KeyEvent) -> None:
        handler = self.key_handlers.get(c)
        if handler is not None:
            handler()
        elif isinstance(c, int):
            self.insert_char(c)

        if c != CTRL_Q:
            self.cfg.quit_times = QUILL_QUIT_TIMES

    def process_keypress(self) -> None:
        self.handle_key(read_key(self.source))

    def file_was_modified(self) -> bool:
        return bool(self.cfg.dirty)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="quill", description="Quill - a small terminal text editor")
    parser.add_argument("filename", nargs="?", help="file to edit")
    parser.add_argument(
        "--tab-stop", type=int, default=QUILL_TAB_STOP, help="tab stop width (default: %(default)s)"
    )
    parser.add_argument("--log-file", help="write a debug log to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="log level for --log-file (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    if args.tab_stop < 1:
        parser.error("--tab-stop must be at least 1")
    return args


def setup_logging(log_file: str | None, level: str) -> None:
    root = logging.getLogger("quill")
    for handler in root.handlers:
        handler.close()
    root.handlers = []
    if not log_file:
        # The terminal is in raw mode; nothing may be printed to it.
        root.addHandler(logging.NullHandler())
        root.propagate = False
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.log_level)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        print("quill: stdin/stdout must be a tty", file=sys.stderr)
        return 1

    editor = Editor(FdByteSource(stdin_fd), stdout_fd, tab_stop=args.tab_stop)
    if args.filename:
        try:
            editor.open_file(args.filename)
        except OSError as exc:
            print(f"quill: {exc}", file=sys.stderr)
            return 1

    try:
        with RawMode(stdin_fd):
            editor.update_window_size(stdin_fd)

            def on_resize(_signum: int, _frame) -> None:
                editor.update_window_size(stdin_fd)
                editor.refresh_screen()

            signal.signal(signal.SIGWINCH, on_resize)
            editor.set_status_message("HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find")
            while True:
                editor.refresh_screen()
                editor.process_keypress()
    except QuitEditor:
        os.write(stdout_fd, b"\x1b[2J\x1b[H")
        return 0
    except OSError as exc:
        os.write(stdout_fd, b"\x1b[2J\x1b[H")
        logger.exception("fatal terminal error")
        print(f"quill: {exc.strerror or exc}", file=sys.stderr)
        return 1


def main() -> None:
    raise SystemExit(run())
