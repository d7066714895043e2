"""Shared string utilities for the dnb engine layer.

Everything that ends up inside generated Python source passes through here:
string literals are built with ``escape_python_string`` and variable names
with ``sanitize_python_variable_name``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_CHARS_RE = re.compile(r"[^0-9a-zA-Z_]")
_INVALID_LEADING_RE = re.compile(r"^[^a-zA-Z_]+")

# Not just `input`, which would shadow the built-in.
EMPTY_VARIABLE_FALLBACK = "input_1"

PYTHON_KEYWORDS = frozenset({
    "False", "None", "True", "and", "as", "assert", "async", "await",
    "break", "class", "continue", "def", "del", "elif", "else", "except",
    "finally", "for", "from", "global", "if", "import", "in", "is",
    "lambda", "nonlocal", "not", "or", "pass", "raise", "return", "try",
    "while", "with", "yield",
})

# Common built-ins that are legal names but confusing to shadow.
PYTHON_BUILTINS = frozenset({
    "abs", "all", "any", "bin", "bool", "bytes", "callable", "chr",
    "classmethod", "compile", "complex", "delattr", "dict", "dir", "divmod",
    "enumerate", "eval", "exec", "filter", "float", "format", "frozenset",
    "getattr", "globals", "hasattr", "hash", "help", "hex", "id", "input",
    "int", "isinstance", "issubclass", "iter", "len", "list", "locals",
    "map", "max", "memoryview", "min", "next", "object", "oct", "open",
    "ord", "pow", "print", "property", "range", "repr", "reversed", "round",
    "set", "setattr", "slice", "sorted", "staticmethod", "str", "sum",
    "super", "tuple", "type", "vars", "zip",
})


def escape_python_string(value: str) -> str:
    """Return ``value`` as a single-quoted Python string literal.

    Backslashes are escaped first, then single quotes, then newlines, so
    that no escape sequence introduced by one step is escaped again.
    """
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def sanitize_python_variable_name(name: str, disable_empty_fallback: bool = False) -> str:
    """Turn an author-supplied name into a valid Python identifier.

    Whitespace runs become underscores, other invalid characters are
    dropped, and leading characters that cannot start an identifier are
    removed. An empty result becomes ``input_1`` unless
    ``disable_empty_fallback`` is set.
    """
    sanitized = _WHITESPACE_RE.sub("_", name)
    sanitized = _INVALID_CHARS_RE.sub("", sanitized)
    sanitized = _INVALID_LEADING_RE.sub("", sanitized)

    if not sanitized and not disable_empty_fallback:
        sanitized = EMPTY_VARIABLE_FALLBACK

    return sanitized


def is_python_keyword(name: str) -> bool:
    return name in PYTHON_KEYWORDS


def is_python_builtin(name: str) -> bool:
    return name in PYTHON_BUILTINS


def is_valid_identifier(value: str) -> bool:
    """True if ``value`` is already a syntactically valid identifier."""
    return bool(_IDENTIFIER_RE.match(value))


@dataclass
class VariableNameValidation:
    """Outcome of checking a variable name before it is used in generated code."""

    is_valid: bool
    is_keyword: bool
    is_builtin: bool
    sanitized_name: str
    warnings: list[str] = field(default_factory=list)


def validate_python_variable_name(name: str) -> VariableNameValidation:
    """Sanitize ``name`` and classify the result.

    Keywords make the name invalid. Shadowing a built-in is allowed but
    reported as a warning.
    """
    sanitized_name = sanitize_python_variable_name(name)
    warnings: list[str] = []

    is_keyword = is_python_keyword(sanitized_name)
    is_builtin = is_python_builtin(sanitized_name)

    if is_keyword:
        warnings.append(
            f'"{sanitized_name}" is a Python reserved keyword and cannot be used as a variable name.'
        )
    if is_builtin:
        warnings.append(
            f'"{sanitized_name}" shadows a Python built-in function. This may cause unexpected behavior.'
        )

    return VariableNameValidation(
        is_valid=not is_keyword,
        is_keyword=is_keyword,
        is_builtin=is_builtin,
        sanitized_name=sanitized_name,
        warnings=warnings,
    )
