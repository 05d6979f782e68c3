from __future__ import annotations

QUILL_VERSION = "0.2.0"
QUILL_TAB_STOP = 8
QUILL_QUERY_LEN = 256
QUILL_QUIT_TIMES = 3
QUILL_STATUS_TIMEOUT = 5.0

SEPARATORS = ",.()+-/*=~%<>[];"

HL_HIGHLIGHT_NUMBERS = 1 << 0
HL_HIGHLIGHT_STRINGS = 1 << 1


def ctrl(ch: str) -> int:
    return ord(ch.upper()) & 0x1F


# Raw input bytes.
KEY_NULL = 0
CTRL_A = ctrl("a")
CTRL_C = ctrl("c")
CTRL_E = ctrl("e")
CTRL_F = ctrl("f")
CTRL_H = ctrl("h")
TAB = 9
CTRL_L = ctrl("l")
ENTER = 13
CTRL_Q = ctrl("q")
CTRL_S = ctrl("s")
ESC = 27
DEL_BYTE = 127

C_HL_EXTENSIONS = (".c", ".h", ".cpp", ".hpp", ".cc")
C_HL_KEYWORDS = (
    "auto", "break", "case", "continue", "default", "do", "else", "enum",
    "extern", "for", "goto", "if", "register", "return", "sizeof", "static",
    "struct", "switch", "typedef", "union", "volatile", "while", "NULL",
    "alignas", "alignof", "and", "and_eq", "asm", "bitand", "bitor", "class",
    "compl", "constexpr", "const_cast", "deltype", "delete", "dynamic_cast",
    "explicit", "export", "false", "friend", "inline", "mutable", "namespace",
    "new", "noexcept", "not", "not_eq", "nullptr", "operator", "or", "or_eq",
    "private", "protected", "public", "reinterpret_cast", "static_assert",
    "static_cast", "template", "this", "thread_local", "throw", "true", "try",
    "typeid", "typename", "virtual", "xor", "xor_eq",
)
C_HL_TYPES = (
    "int", "long", "double", "float", "char", "unsigned", "signed", "void",
    "short", "const", "bool",
)

GO_HL_EXTENSIONS = (".go",)
GO_HL_KEYWORDS = (
    "switch", "if", "for", "range", "break", "continue", "return", "else",
    "case", "struct", "type", "package", "import", "var", "const", "go",
    "defer", "select", "default", "interface", "nil", "true", "false",
)
GO_HL_TYPES = (
    "int", "int32", "int64", "uint", "uint32", "uint64", "float", "float32",
    "float64", "string", "rune", "byte", "map", "chan", "error", "func", "bool",
)

PY_HL_EXTENSIONS = (".py", ".pyi", "SConstruct")
PY_HL_KEYWORDS = (
    "and", "as", "assert", "async", "await", "break", "class", "continue",
    "def", "del", "elif", "else", "except", "finally", "for", "from",
    "global", "if", "import", "in", "is", "lambda", "nonlocal", "not", "or",
    "pass", "raise", "return", "try", "while", "with", "yield",
)
PY_HL_TYPES = (
    "None", "True", "False", "self", "int", "float", "str", "bytes", "list",
    "dict", "set", "tuple", "object",
)
