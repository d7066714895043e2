"""Exceptions raised while compiling individual blocks."""

from __future__ import annotations


class BlockError(Exception):
    """Base class for per-block compilation failures."""

    def __init__(self, message: str, block_id: str | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.block_id = block_id
        self.field = field


class UnsupportedBlockTypeError(BlockError):
    """No compiler is registered for a block kind and operation."""

    def __init__(self, block_type: str, operation: str, block_id: str | None = None) -> None:
        super().__init__(
            f"{operation} from block type {block_type} is not supported yet.",
            block_id=block_id,
        )
        self.block_type = block_type
        self.operation = operation


class VisualizationBlockError(BlockError):
    pass


class ButtonBlockError(BlockError):
    pass


class InputBlockError(BlockError):
    pass


def missing_field_error(error_cls: type[BlockError], kind: str, block_id: str, field: str) -> BlockError:
    return error_cls(
        f'{kind} block "{block_id}" is missing required field "{field}".',
        block_id=block_id,
        field=field,
    )
