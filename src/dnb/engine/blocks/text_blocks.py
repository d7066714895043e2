"""Text cells, markdown cells and separators."""

from __future__ import annotations

import re

from dnb.engine.schema import (
    BaseBlock,
    CalloutTextBlock,
    MarkdownBlock,
    SeparatorBlock,
    TextBlock,
    TodoTextBlock,
)

from .errors import UnsupportedBlockTypeError

TEXT_BLOCK_TYPES = frozenset({
    "text-cell-p",
    "text-cell-h1",
    "text-cell-h2",
    "text-cell-h3",
    "text-cell-bullet",
    "text-cell-todo",
    "text-cell-callout",
})

HEADING_LEVELS = {"text-cell-h1": 1, "text-cell-h2": 2, "text-cell-h3": 3}

SEPARATOR_MARKDOWN = "<hr>"

_MARKDOWN_SPECIAL_CHARS_RE = re.compile(r"([\\*_`\[\]()])")
_TRAILING_PERIOD_RE = re.compile(r"\.\Z")

_HEADING_PREFIX_RE = re.compile(r"^#{1,6}\s+")
_TODO_PREFIX_RE = re.compile(r"^-\s+\[[ xX]\]\s+")
_BULLET_PREFIX_RE = re.compile(r"^-\s+")
_CALLOUT_PREFIX_RE = re.compile(r"^>\s+")

_STRIP_PREFIXES = {
    "text-cell-h1": _HEADING_PREFIX_RE,
    "text-cell-h2": _HEADING_PREFIX_RE,
    "text-cell-h3": _HEADING_PREFIX_RE,
    "text-cell-bullet": _BULLET_PREFIX_RE,
    "text-cell-todo": _TODO_PREFIX_RE,
    "text-cell-callout": _CALLOUT_PREFIX_RE,
}


def is_text_block(block: BaseBlock) -> bool:
    return block.type in TEXT_BLOCK_TYPES


def is_markdown_block(block: BaseBlock) -> bool:
    return block.type == "markdown"


def is_separator_block(block: BaseBlock) -> bool:
    return block.type == "separator"


def escape_markdown(text: str) -> str:
    """Backslash-escape markdown metacharacters in plain paragraph text.

    A trailing period is escaped as well, which is what the editor's
    renderer expects for paragraphs.
    """
    escaped = _MARKDOWN_SPECIAL_CHARS_RE.sub(r"\\\1", text)
    return _TRAILING_PERIOD_RE.sub(r"\\.", escaped)


def create_markdown_for_markdown_block(block: MarkdownBlock) -> str:
    return block.content or ""


def create_markdown_for_text_block(block: TextBlock | TodoTextBlock | CalloutTextBlock) -> str:
    content = block.content or ""
    kind = block.type

    if kind in HEADING_LEVELS:
        return f"{'#' * HEADING_LEVELS[kind]} {content}"
    if kind == "text-cell-p":
        return escape_markdown(content)
    if kind == "text-cell-bullet":
        return f"- {content}"
    if kind == "text-cell-todo":
        checkbox = "[x]" if block.metadata.checked else "[ ]"
        return f"- {checkbox} {content}"
    if kind == "text-cell-callout":
        return f"> {content}"

    raise UnsupportedBlockTypeError(kind, "Creating markdown", block_id=block.id)


def strip_markdown_from_text_block(block: TextBlock | TodoTextBlock | CalloutTextBlock) -> str:
    """Remove the structural prefix a text cell was rendered with.

    Character-level escaping is not reversed.
    """
    content = (block.content or "").strip()
    prefix_re = _STRIP_PREFIXES.get(block.type)
    if prefix_re is not None:
        content = prefix_re.sub("", content, count=1)
    return content.strip()


def create_markdown_for_separator_block(block: SeparatorBlock) -> str:
    return SEPARATOR_MARKDOWN
