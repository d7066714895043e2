"""Dispatch a block to the compiler registered for its kind.

Python code and markdown are two separate tables: most kinds only support
one of the two. A kind missing from the requested table raises
``UnsupportedBlockTypeError``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from dnb.engine.schema import BaseBlock

from .big_number_block import create_python_code_for_big_number_block
from .button_block import ButtonExecutionContext, create_python_code_for_button_block
from .code_block import create_python_code_for_code_block
from .errors import UnsupportedBlockTypeError
from .image_block import create_markdown_for_image_block
from .input_blocks import (
    create_python_code_for_input_checkbox_block,
    create_python_code_for_input_date_block,
    create_python_code_for_input_date_range_block,
    create_python_code_for_input_file_block,
    create_python_code_for_input_select_block,
    create_python_code_for_input_slider_block,
    create_python_code_for_input_text_block,
    create_python_code_for_input_textarea_block,
)
from .sql_block import create_python_code_for_sql_block
from .text_blocks import (
    TEXT_BLOCK_TYPES,
    create_markdown_for_markdown_block,
    create_markdown_for_separator_block,
    create_markdown_for_text_block,
    strip_markdown_from_text_block,
)
from .visualization_block import create_python_code_for_visualization_block

PythonCodeCompiler = Callable[[Any, Optional[ButtonExecutionContext]], str]


def _without_context(compiler: Callable[[Any], str]) -> PythonCodeCompiler:
    return lambda block, execution_context: compiler(block)


PYTHON_CODE_COMPILERS: dict[str, PythonCodeCompiler] = {
    "code": _without_context(create_python_code_for_code_block),
    "sql": _without_context(create_python_code_for_sql_block),
    "input-text": _without_context(create_python_code_for_input_text_block),
    "input-textarea": _without_context(create_python_code_for_input_textarea_block),
    "input-checkbox": _without_context(create_python_code_for_input_checkbox_block),
    "input-select": _without_context(create_python_code_for_input_select_block),
    "input-slider": _without_context(create_python_code_for_input_slider_block),
    "input-file": _without_context(create_python_code_for_input_file_block),
    "input-date": _without_context(create_python_code_for_input_date_block),
    "input-date-range": _without_context(create_python_code_for_input_date_range_block),
    "visualization": _without_context(create_python_code_for_visualization_block),
    "button": create_python_code_for_button_block,
    "big-number": _without_context(create_python_code_for_big_number_block),
}

MARKDOWN_COMPILERS: dict[str, Callable[[Any], str]] = {
    "markdown": create_markdown_for_markdown_block,
    **{kind: create_markdown_for_text_block for kind in sorted(TEXT_BLOCK_TYPES)},
    "separator": create_markdown_for_separator_block,
    "image": create_markdown_for_image_block,
}


def supports_python_code(block: BaseBlock) -> bool:
    return block.type in PYTHON_CODE_COMPILERS


def supports_markdown(block: BaseBlock) -> bool:
    return block.type in MARKDOWN_COMPILERS


def create_python_code(
    block: BaseBlock,
    execution_context: ButtonExecutionContext | None = None,
) -> str:
    """Convert a block into executable Python source.

    ``execution_context`` is only consulted by button blocks; it lists the
    button variables that resolve to True for this execution pass.

    Raises:
        UnsupportedBlockTypeError: the kind has no Python representation.
        VisualizationBlockError, ButtonBlockError, InputBlockError: the
            block is missing a field its kind requires.
    """
    compiler = PYTHON_CODE_COMPILERS.get(block.type)
    if compiler is None:
        raise UnsupportedBlockTypeError(block.type, "Creating python code", block_id=block.id)
    return compiler(block, execution_context)


def create_markdown(block: BaseBlock) -> str:
    """Convert a block into markdown (or inline HTML for images and separators)."""
    compiler = MARKDOWN_COMPILERS.get(block.type)
    if compiler is None:
        raise UnsupportedBlockTypeError(block.type, "Creating markdown", block_id=block.id)
    return compiler(block)


def strip_markdown(block: BaseBlock) -> str:
    """Plain text of a text cell, without its heading/list/callout prefix."""
    if block.type not in TEXT_BLOCK_TYPES:
        raise UnsupportedBlockTypeError(block.type, "Stripping markdown", block_id=block.id)
    return strip_markdown_from_text_block(block)
