"""Tests for syntax profile selection and the highlighting state machine."""

from quill.models import EditorConfig, EditorSyntax, Highlight, Keyword
from quill.rows import del_row, insert_row, row_del_char, row_insert_char
from quill.syntax import HLDB, find_syntax, highlight_row, is_separator, select_syntax_highlight

N = Highlight.NORMAL
K1 = Highlight.KEYWORD1
K2 = Highlight.KEYWORD2
NUM = Highlight.NUMBER
STR = Highlight.STRING
COM = Highlight.COMMENT
ML = Highlight.MLCOMMENT


class TestProfileSelection:

    def test_extension_match(self):
        assert find_syntax("main.c").filetype == "c"
        assert find_syntax("dir/thing.hpp").filetype == "c"
        assert find_syntax("server.go").filetype == "go"
        assert find_syntax("tool.py").filetype == "python"

    def test_extension_must_be_exact(self):
        assert find_syntax("main.c.txt") is None
        assert find_syntax("notes.cfg") is None

    def test_substring_rule(self):
        assert find_syntax("build/SConstruct").filetype == "python"

    def test_no_match(self):
        assert find_syntax("README") is None

    def test_first_entry_wins(self):
        make = EditorSyntax(
            filetype="make",
            filematch=("Makefile", ".mk"),
            keywords=(Keyword("include"),),
            singleline_comment_start="#",
            multiline_comment_start="",
            multiline_comment_end="",
            flags=0,
        )
        assert find_syntax("Makefile.c", (make,) + HLDB).filetype == "make"
        assert find_syntax("Makefile.c", HLDB + (make,)).filetype == "c"
        assert find_syntax("rules.mk", HLDB + (make,)).filetype == "make"

    def test_select_rehighlights_existing_rows(self, make_config):
        cfg = make_config(["int x;"])
        assert cfg.rows[0].hl == [N] * 6
        select_syntax_highlight(cfg, "a.c")
        assert cfg.rows[0].hl[:3] == [K2] * 3


class TestSeparators:

    def test_separator_set(self):
        for ch in " \0,.()+-/*=~%<>[];":
            assert is_separator(ch)

    def test_non_separators(self):
        for ch in "aZ0_\"'{":
            assert not is_separator(ch)


class TestKeywords:

    def test_keyword_needs_trailing_separator(self, make_config, c_syntax):
        cfg = make_config(["intX"], c_syntax)
        assert cfg.rows[0].hl == [N] * 4

    def test_keyword_followed_by_separator(self, make_config, c_syntax):
        cfg = make_config(["int "], c_syntax)
        assert cfg.rows[0].hl == [K2, K2, K2, N]

    def test_keyword_at_end_of_row(self, make_config, c_syntax):
        cfg = make_config(["int"], c_syntax)
        assert cfg.rows[0].hl == [K2, K2, K2]

    def test_primary_keyword(self, make_config, c_syntax):
        cfg = make_config(["return x;"], c_syntax)
        assert cfg.rows[0].hl[:6] == [K1] * 6
        assert cfg.rows[0].hl[6:] == [N] * 3

    def test_keyword_needs_leading_separator(self, make_config, c_syntax):
        cfg = make_config(["xint"], c_syntax)
        assert cfg.rows[0].hl == [N] * 4

    def test_keyword_span_only(self, make_config, c_syntax):
        cfg = make_config(["if(x)"], c_syntax)
        assert cfg.rows[0].hl == [K1, K1, N, N, N]

    def test_longer_keyword_after_shorter_prefix(self, make_config, c_syntax):
        cfg = make_config(["double d"], c_syntax)
        assert cfg.rows[0].hl[:6] == [K2] * 6

    def test_keyword_after_tab(self, make_config, c_syntax):
        cfg = make_config(["\tint"], c_syntax)
        row = cfg.rows[0]
        assert row.render == " " * 8 + "int"
        assert row.hl[8:] == [K2] * 3


class TestLiterals:

    def test_numbers(self, make_config, c_syntax):
        cfg = make_config(["x = 3.14;"], c_syntax)
        assert cfg.rows[0].hl[4:8] == [NUM] * 4
        assert cfg.rows[0].hl[8] == N

    def test_digit_inside_identifier_is_not_a_number(self, make_config, c_syntax):
        cfg = make_config(["a1"], c_syntax)
        assert cfg.rows[0].hl == [N, N]

    def test_numbers_are_not_validated(self, make_config, c_syntax):
        cfg = make_config(["1.2.3"], c_syntax)
        assert cfg.rows[0].hl == [NUM] * 5

    def test_string(self, make_config, c_syntax):
        cfg = make_config(['s = "hi";'], c_syntax)
        assert cfg.rows[0].hl == [N, N, N, N, STR, STR, STR, STR, N]

    def test_single_quoted_string(self, make_config, c_syntax):
        cfg = make_config(["'a'"], c_syntax)
        assert cfg.rows[0].hl == [STR] * 3

    def test_escaped_delimiter_does_not_close_string(self, make_config, c_syntax):
        cfg = make_config(['"a\\"b" c'], c_syntax)
        assert cfg.rows[0].hl == [STR] * 6 + [N, N]

    def test_other_quote_does_not_close_string(self, make_config, c_syntax):
        cfg = make_config(['"it\'s" 1'], c_syntax)
        assert cfg.rows[0].hl[:6] == [STR] * 6

    def test_comment_marker_inside_string(self, make_config, c_syntax):
        cfg = make_config(['"//" x'], c_syntax)
        assert cfg.rows[0].hl == [STR] * 4 + [N, N]


class TestComments:

    def test_line_comment(self, make_config, c_syntax):
        cfg = make_config(["x; // note"], c_syntax)
        assert cfg.rows[0].hl[:3] == [N] * 3
        assert cfg.rows[0].hl[3:] == [COM] * 7

    def test_line_comment_stops_scan(self, make_config, c_syntax):
        cfg = make_config(["// int /* x"], c_syntax)
        assert cfg.rows[0].hl == [COM] * 11
        assert cfg.rows[0].hl_oc is False

    def test_block_comment_in_one_row(self, make_config, c_syntax):
        cfg = make_config(["a /* b */ 1"], c_syntax)
        assert cfg.rows[0].hl == [N, N] + [ML] * 7 + [N, NUM]
        assert cfg.rows[0].hl_oc is False

    def test_unterminated_block_comment_covers_document(self, make_config, c_syntax):
        cfg = make_config(["/* start", "int x = 1;", "\"str\"", "// no"], c_syntax)
        for row in cfg.rows:
            assert row.hl_oc is True
            assert row.hl == [ML] * row.rsize

    def test_block_comment_closed_on_later_row(self, make_config, c_syntax):
        cfg = make_config(["/* a", "b */ int"], c_syntax)
        assert cfg.rows[0].hl_oc is True
        assert cfg.rows[1].hl == [ML] * 4 + [N, K2, K2, K2]
        assert cfg.rows[1].hl_oc is False

    def test_profile_without_block_comments(self, make_config):
        py = find_syntax("x.py")
        cfg = make_config(["/* not a comment", "def f"], py)
        assert cfg.rows[0].hl_oc is False
        assert cfg.rows[1].hl[:3] == [K1] * 3

    def test_hash_comment(self, make_config):
        cfg = make_config(["x = 1  # one"], find_syntax("x.py"))
        assert cfg.rows[0].hl[7:] == [COM] * 5


class TestPropagation:

    def test_opening_comment_rehighlights_following_rows(self, make_config, c_syntax):
        cfg = make_config(["int a;", "b = 1;", "c"], c_syntax)
        assert cfg.rows[1].hl[4] == NUM

        row_insert_char(cfg, cfg.rows[0], 0, "/")
        row_insert_char(cfg, cfg.rows[0], 1, "*")

        for row in cfg.rows:
            assert row.hl_oc is True
            assert row.hl == [ML] * row.rsize

    def test_closing_comment_restores_following_rows(self, make_config, c_syntax):
        cfg = make_config(["/*int a;", "b = 1;", "c"], c_syntax)
        row_del_char(cfg, cfg.rows[0], 0)

        assert [row.hl_oc for row in cfg.rows] == [False, False, False]
        assert cfg.rows[0].hl[1:4] == [K2] * 3
        assert cfg.rows[1].hl == [N, N, N, N, NUM, N]

    def test_inserted_row_closing_comment(self, make_config, c_syntax):
        cfg = make_config(["/* a", "b", "c */"], c_syntax)
        insert_row(cfg, 1, "*/")

        assert [row.idx for row in cfg.rows] == [0, 1, 2, 3]
        assert [row.hl_oc for row in cfg.rows] == [True, False, False, False]
        assert cfg.rows[2].hl == [N]
        assert cfg.rows[3].hl == [N] * 4

    def test_deleted_row_reconnects_comment(self, make_config, c_syntax):
        cfg = make_config(["/* a", "*/", "x"], c_syntax)
        assert cfg.rows[2].hl == [N]
        del_row(cfg, 1)

        assert cfg.rows[1].chars == "x"
        assert cfg.rows[1].hl == [ML]
        assert cfg.rows[1].hl_oc is True

    def test_long_cascade_does_not_recurse(self, make_config, c_syntax):
        cfg = make_config(["/*"] + ["x"] * 5000, c_syntax)
        assert cfg.rows[-1].hl_oc is True

        del_row(cfg, 0)
        assert all(not row.hl_oc for row in cfg.rows)
        assert cfg.rows[-1].hl == [N]

    def test_flags_match_full_rescan(self, make_config, c_syntax):
        cfg = make_config(["a /* b", "c */ d /* e", "f", "g */", "h"], c_syntax)
        row_insert_char(cfg, cfg.rows[2], 0, "*")
        row_insert_char(cfg, cfg.rows[2], 1, "/")

        in_comment = False
        for row in cfg.rows:
            expected = list(row.hl)
            in_comment = highlight_row(row, c_syntax, in_comment)
            assert row.hl == expected
            assert row.hl_oc == in_comment


class TestNoProfile:

    def test_everything_normal(self, make_config):
        cfg = make_config(["/* int 1 \"s\"", "\tx"])
        for row in cfg.rows:
            assert row.hl == [N] * row.rsize
            assert row.hl_oc is False

    def test_highlight_row_without_profile(self):
        cfg = EditorConfig()
        insert_row(cfg, 0, "abc")
        assert highlight_row(cfg.rows[0], None, True) is False
        assert cfg.rows[0].hl == [N] * 3
