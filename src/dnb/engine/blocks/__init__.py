"""Block compilers: turn notebook blocks into Python source or markdown.

Code-like kinds (code, sql, inputs, button, visualization, big-number)
compile to Python; display kinds (markdown, text cells, separator, image)
compile to markdown. Everything is dispatched by the block's ``type``:
    from dnb.engine.blocks import create_python_code, create_markdown
"""

from __future__ import annotations

# Errors
from .errors import (
    BlockError,
    ButtonBlockError,
    InputBlockError,
    UnsupportedBlockTypeError,
    VisualizationBlockError,
)

# Dispatch
from .registry import create_markdown, create_python_code, strip_markdown

# Per-kind predicates
from .big_number_block import is_big_number_block
from .button_block import ButtonExecutionContext, is_button_block
from .code_block import is_code_block
from .image_block import is_image_block, is_valid_image_url, sanitize_image_url
from .input_blocks import (
    is_input_checkbox_block,
    is_input_date_block,
    is_input_date_range_block,
    is_input_file_block,
    is_input_select_block,
    is_input_slider_block,
    is_input_text_block,
    is_input_textarea_block,
)
from .sql_block import is_sql_block
from .text_blocks import is_markdown_block, is_separator_block, is_text_block
from .visualization_block import is_visualization_block

# Notebooks
from .runner import (
    CompiledBlock,
    check_project_references,
    compile_notebook,
    create_sorting_key,
    notebook_to_markdown,
    notebook_to_script,
    sort_blocks,
)

__all__ = [
    # Errors
    "BlockError",
    "ButtonBlockError",
    "InputBlockError",
    "UnsupportedBlockTypeError",
    "VisualizationBlockError",
    # Dispatch
    "create_markdown",
    "create_python_code",
    "strip_markdown",
    # Per-kind predicates
    "ButtonExecutionContext",
    "is_big_number_block",
    "is_button_block",
    "is_code_block",
    "is_image_block",
    "is_input_checkbox_block",
    "is_input_date_block",
    "is_input_date_range_block",
    "is_input_file_block",
    "is_input_select_block",
    "is_input_slider_block",
    "is_input_text_block",
    "is_input_textarea_block",
    "is_markdown_block",
    "is_separator_block",
    "is_sql_block",
    "is_text_block",
    "is_valid_image_url",
    "is_visualization_block",
    "sanitize_image_url",
    # Notebooks
    "CompiledBlock",
    "check_project_references",
    "compile_notebook",
    "create_sorting_key",
    "notebook_to_markdown",
    "notebook_to_script",
    "sort_blocks",
]
