from __future__ import annotations

import errno
import fcntl
import logging
import os
import re
import struct
import termios
from contextlib import AbstractContextManager
from typing import Protocol

from .constants import DEL_BYTE, ESC
from .models import Key, KeyEvent

logger = logging.getLogger(__name__)

CSI_LETTER_MAP: dict[int, Key] = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}
CSI_TILDE_MAP: dict[int, Key] = {
    ord("1"): Key.HOME,
    ord("3"): Key.DELETE,
    ord("4"): Key.END,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
    ord("7"): Key.HOME,
    ord("8"): Key.END,
}
SS3_MAP: dict[int, Key] = {
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}


class ByteSource(Protocol):
    def read_byte(self) -> int | None:
        """Return the next byte, or None when the read timed out.

        Hard errors are raised as OSError.
        """


class FdByteSource:
    def __init__(self, fd: int) -> None:
        self.fd = fd

    def read_byte(self) -> int | None:
        try:
            data = os.read(self.fd, 1)
        except InterruptedError:
            return None
        if not data:
            return None
        return data[0]


def _read_byte_blocking(source: ByteSource) -> int:
    while True:
        c = source.read_byte()
        if c is not None:
            return c


def _utf8_length(lead: int) -> int:
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 1


def _read_code_point(source: ByteSource, lead: int) -> int:
    length = _utf8_length(lead)
    if length == 1:
        return lead
    buf = bytearray([lead])
    for _ in range(length - 1):
        c = source.read_byte()
        if c is None or c & 0xC0 != 0x80:
            return lead
        buf.append(c)
    try:
        return ord(buf.decode("utf-8"))
    except UnicodeDecodeError:
        return lead


def read_key(source: ByteSource) -> KeyEvent:
    c = _read_byte_blocking(source)
    if c == DEL_BYTE:
        return Key.BACKSPACE
    if c >= 0x80:
        return _read_code_point(source, c)
    if c != ESC:
        return c

    seq0 = source.read_byte()
    if seq0 is None:
        return Key.ESCAPE
    seq1 = source.read_byte()
    if seq1 is None:
        return Key.ESCAPE

    if seq0 == ord("["):
        if ord("0") <= seq1 <= ord("9"):
            seq2 = source.read_byte()
            if seq2 == ord("~") and seq1 in CSI_TILDE_MAP:
                return CSI_TILDE_MAP[seq1]
        elif seq1 in CSI_LETTER_MAP:
            return CSI_LETTER_MAP[seq1]
    elif seq0 == ord("O") and seq1 in SS3_MAP:
        return SS3_MAP[seq1]

    logger.debug("unrecognised escape sequence %r %r", chr(seq0), chr(seq1))
    return Key.ESCAPE


def get_cursor_position(ifd: int, ofd: int) -> tuple[int, int]:
    if os.write(ofd, b"\x1b[6n") != 4:
        raise OSError(errno.EIO, "cursor query write failed")

    source = FdByteSource(ifd)
    buf = bytearray()
    while len(buf) < 31:
        c = source.read_byte()
        if c is None:
            break
        buf.append(c)
        if c == ord("R"):
            break

    match = re.match(rb"\x1b\[(\d+);(\d+)R", bytes(buf))
    if not match:
        raise OSError(errno.EIO, "invalid cursor position response")
    return int(match.group(1)), int(match.group(2))


def get_window_size(ifd: int, ofd: int) -> tuple[int, int]:
    try:
        packed = fcntl.ioctl(ofd, termios.TIOCGWINSZ, struct.pack("HHHH", 0, 0, 0, 0))
        rows, cols, _, _ = struct.unpack("HHHH", packed)
        if cols:
            return rows, cols
    except OSError:
        logger.debug("TIOCGWINSZ failed, probing with cursor position")

    orig_row, orig_col = get_cursor_position(ifd, ofd)
    if os.write(ofd, b"\x1b[999C\x1b[999B") != 12:
        raise OSError(errno.EIO, "window query write failed")
    rows, cols = get_cursor_position(ifd, ofd)
    os.write(ofd, f"\x1b[{orig_row};{orig_col}H".encode())
    return rows, cols


class RawMode(AbstractContextManager["RawMode"]):
    """Switch ``fd`` into raw mode for the duration of the block."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self.saved_attrs: list | None = None

    def __enter__(self) -> "RawMode":
        if not os.isatty(self.fd):
            raise OSError(errno.ENOTTY, "input is not a terminal")

        self.saved_attrs = termios.tcgetattr(self.fd)
        attrs = termios.tcgetattr(self.fd)
        iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
        iflag &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        oflag &= ~termios.OPOST
        cflag |= termios.CS8
        lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        # Reads return after at most 100ms so the caller can do periodic work.
        cc[termios.VMIN] = 0
        cc[termios.VTIME] = 1
        termios.tcsetattr(
            self.fd, termios.TCSAFLUSH, [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]
        )
        logger.debug("fd %d switched to raw mode", self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.saved_attrs is None:
            return
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, self.saved_attrs)
        self.saved_attrs = None
        logger.debug("fd %d restored", self.fd)
