"""Notebook compilation: turn every block of a notebook into text, in order."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Literal

from dnb.engine.schema import BaseBlock, DeepnoteFile, Notebook

from .button_block import ButtonExecutionContext
from .errors import BlockError
from .registry import create_markdown, create_python_code, supports_markdown, supports_python_code

logger = logging.getLogger("dnb.blocks")

SORTING_KEY_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"
SORTING_KEY_MAX_LENGTH = 6

OnError = Literal["fail", "skip"]


@dataclass
class CompiledBlock:
    block_id: str
    kind: str
    language: Literal["python", "markdown"]
    text: str


def sort_blocks(blocks: Iterable[BaseBlock]) -> list[BaseBlock]:
    """Blocks ordered by sorting key; ties keep their stored order."""
    return sorted(blocks, key=lambda block: block.sorting_key)


def create_sorting_key(index: int) -> str:
    """Sorting key for the block at ``index``: bijective base-36, at most six chars.

    0 -> "0", 35 -> "z", 36 -> "00".
    """
    if index < 0:
        raise ValueError("Index must be non-negative")

    base = len(SORTING_KEY_CHARS)
    result = ""
    num = index + 1
    length = 0
    while num > 0 and length < SORTING_KEY_MAX_LENGTH:
        num -= 1
        result = SORTING_KEY_CHARS[num % base] + result
        num //= base
        length += 1

    if num > 0:
        raise ValueError(f"Index {index} exceeds maximum key length of {SORTING_KEY_MAX_LENGTH}")
    return result


def _compile_block(
    block: BaseBlock,
    execution_context: ButtonExecutionContext | None,
) -> CompiledBlock | None:
    if supports_python_code(block):
        return CompiledBlock(block.id, block.type, "python", create_python_code(block, execution_context))
    if supports_markdown(block):
        return CompiledBlock(block.id, block.type, "markdown", create_markdown(block))
    logger.debug("Skipping block %s of kind %s", block.id, block.type)
    return None


def compile_notebook(
    notebook: Notebook,
    execution_context: ButtonExecutionContext | None = None,
    on_error: OnError = "fail",
) -> list[CompiledBlock]:
    """Compile every block of a notebook in sorting-key order.

    Kinds with neither a Python nor a markdown form are left out. With
    ``on_error="skip"`` a block that fails to compile is logged and dropped;
    with ``"fail"`` the ``BlockError`` propagates.
    """
    compiled: list[CompiledBlock] = []
    for block in sort_blocks(notebook.blocks):
        try:
            result = _compile_block(block, execution_context)
        except BlockError as e:
            if on_error != "skip":
                raise
            logger.warning("Skipping block %s: %s", block.id, e)
            continue
        if result is not None:
            compiled.append(result)

    logger.info("Compiled %d of %d blocks in notebook %r", len(compiled), len(notebook.blocks), notebook.name)
    return compiled


def _comment(text: str) -> str:
    return "\n".join(f"# {line}".rstrip() for line in text.splitlines())


def notebook_to_script(compiled: Iterable[CompiledBlock]) -> str:
    """Join compiled blocks into one Python script.

    Markdown blocks become ``#`` comments; empty blocks are left out.
    """
    parts = []
    for block in compiled:
        text = block.text.strip("\n")
        if not text:
            continue
        parts.append(text if block.language == "python" else _comment(text))
    return "\n\n".join(parts) + "\n" if parts else ""


def notebook_to_markdown(compiled: Iterable[CompiledBlock]) -> str:
    """Join compiled blocks into one markdown document with fenced Python."""
    parts = []
    for block in compiled:
        text = block.text.strip("\n")
        if not text:
            continue
        parts.append(f"```python\n{text}\n```" if block.language == "python" else text)
    return "\n\n".join(parts) + "\n" if parts else ""


def check_project_references(document: DeepnoteFile) -> list[str]:
    """Cross-notebook problems the schema cannot express."""
    problems: list[str] = []
    notebooks = document.project.notebooks

    counts = Counter(notebook.id for notebook in notebooks)
    for notebook_id, count in counts.items():
        if count > 1:
            problems.append(f"Duplicate notebook id {notebook_id!r} ({count} notebooks)")

    init_id = document.project.init_notebook_id
    if init_id is not None and init_id not in counts:
        problems.append(f"initNotebookId {init_id!r} does not match any notebook")

    return problems
