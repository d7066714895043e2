"""Python code blocks."""

from __future__ import annotations

from dnb.engine.schema import BaseBlock, CodeBlock

from .table_state import create_dataframe_config


def is_code_block(block: BaseBlock) -> bool:
    return block.type == "code"


def create_python_code_for_code_block(block: CodeBlock) -> str:
    """Return the block's source, prefixed by its dataframe display config."""
    config = create_dataframe_config(block.metadata.deepnote_table_state)
    return f"{config}\n\n{block.content or ''}"
