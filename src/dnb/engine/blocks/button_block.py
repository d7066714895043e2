"""Button blocks.

A ``set_variable`` button binds a boolean that tells downstream code
whether this execution pass was started by clicking that button. ``run``
buttons (and buttons saved before behaviors existed) only trigger
execution in the editor and compile to nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dnb.engine.schema import BaseBlock, ButtonBlock
from dnb.engine.utils import sanitize_python_variable_name

from .errors import ButtonBlockError


@dataclass(frozen=True)
class ButtonExecutionContext:
    """Sanitized names of the button variables that resolve to True in this pass."""

    variable_context: tuple[str, ...] = field(default_factory=tuple)

    def __contains__(self, variable_name: object) -> bool:
        return variable_name in self.variable_context


def is_button_block(block: BaseBlock) -> bool:
    return block.type == "button"


def create_python_code_for_button_block(
    block: ButtonBlock,
    execution_context: ButtonExecutionContext | None = None,
) -> str:
    metadata = block.metadata
    if metadata.deepnote_button_behavior != "set_variable":
        return ""

    if not metadata.deepnote_variable_name:
        raise ButtonBlockError(
            f'Button block "{block.id}" has behavior "set_variable" but is missing '
            f'required field "deepnote_variable_name".',
            block_id=block.id,
            field="deepnote_variable_name",
        )

    variable_name = sanitize_python_variable_name(metadata.deepnote_variable_name)
    clicked = execution_context is not None and variable_name in execution_context
    return f"{variable_name} = {'True' if clicked else 'False'}"
