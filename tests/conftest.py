from __future__ import annotations

import os

import pytest

from quill.models import EditorConfig, EditorSyntax
from quill.rows import insert_row
from quill.syntax import HLDB


C_SYNTAX = HLDB[0]


def build_config(lines: list[str], syntax: EditorSyntax | None = None, tab_stop: int = 8) -> EditorConfig:
    cfg = EditorConfig(tab_stop=tab_stop)
    cfg.syntax = syntax
    for line in lines:
        insert_row(cfg, cfg.numrows, line)
    cfg.dirty = 0
    return cfg


class FakeSource:
    """Byte source fed from a list; None entries simulate read timeouts."""

    def __init__(self, data: bytes | list[int | None]) -> None:
        self.data = list(data)

    def read_byte(self) -> int | None:
        if not self.data:
            return None
        return self.data.pop(0)


@pytest.fixture
def make_config():
    return build_config


@pytest.fixture
def c_syntax() -> EditorSyntax:
    return C_SYNTAX


@pytest.fixture
def screen_fd(tmp_path):
    fd = os.open(str(tmp_path / "screen"), os.O_WRONLY | os.O_CREAT, 0o644)
    yield fd
    os.close(fd)
