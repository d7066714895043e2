"""Input blocks: each one assigns the widget's current value to a variable."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any

from dnb.engine.schema import (
    BaseBlock,
    InputCheckboxBlock,
    InputDateBlock,
    InputDateRangeBlock,
    InputFileBlock,
    InputSelectBlock,
    InputSliderBlock,
    InputTextareaBlock,
    InputTextBlock,
)
from dnb.engine.utils import escape_python_string, sanitize_python_variable_name

from . import snippets
from .errors import InputBlockError

logger = logging.getLogger("dnb.blocks")

# Upper bound for "customDaysN" relative date ranges (ten years).
MAX_CUSTOM_DAYS = 3650

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CUSTOM_DAYS_RE = re.compile(r"^customDays(\d+)$")
_NUMERIC_LITERAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

PAST_7_DAYS = "past7days"


def is_input_text_block(block: BaseBlock) -> bool:
    return block.type == "input-text"


def is_input_textarea_block(block: BaseBlock) -> bool:
    return block.type == "input-textarea"


def is_input_checkbox_block(block: BaseBlock) -> bool:
    return block.type == "input-checkbox"


def is_input_select_block(block: BaseBlock) -> bool:
    return block.type == "input-select"


def is_input_slider_block(block: BaseBlock) -> bool:
    return block.type == "input-slider"


def is_input_file_block(block: BaseBlock) -> bool:
    return block.type == "input-file"


def is_input_date_block(block: BaseBlock) -> bool:
    return block.type == "input-date"


def is_input_date_range_block(block: BaseBlock) -> bool:
    return block.type == "input-date-range"


# --- Date validation ---


def is_valid_date(value: str) -> bool:
    """True for an empty string or a real calendar date in YYYY-MM-DD form."""
    if value == "":
        return True
    if not _ISO_DATE_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def is_valid_date_range_order(start: str, end: str) -> bool:
    """An open-ended range (either side empty) is always in order."""
    if not start or not end:
        return True
    return datetime.strptime(start, "%Y-%m-%d") <= datetime.strptime(end, "%Y-%m-%d")


def is_valid_absolute_date_range(value: Any) -> bool:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return False
    start, end = value
    if not isinstance(start, str) or not isinstance(end, str):
        return False
    if not is_valid_date(start) or not is_valid_date(end):
        return False
    return is_valid_date_range_order(start, end)


def parse_custom_days(value: str) -> int | None:
    """Day count from a ``customDaysN`` token, or None if it is not one."""
    match = _CUSTOM_DAYS_RE.match(value)
    if not match:
        return None
    return int(match.group(1))


def is_valid_custom_days(days: int) -> bool:
    return 1 <= days <= MAX_CUSTOM_DAYS


# --- Compilers ---


def _variable_name(block: BaseBlock) -> str:
    return sanitize_python_variable_name(block.metadata.deepnote_variable_name)


def create_python_code_for_input_text_block(block: InputTextBlock) -> str:
    value = escape_python_string(block.metadata.deepnote_variable_value)
    return f"{_variable_name(block)} = {value}"


def create_python_code_for_input_textarea_block(block: InputTextareaBlock) -> str:
    value = escape_python_string(block.metadata.deepnote_variable_value)
    return f"{_variable_name(block)} = {value}"


def create_python_code_for_input_checkbox_block(block: InputCheckboxBlock) -> str:
    value = "True" if block.metadata.deepnote_variable_value else "False"
    return f"{_variable_name(block)} = {value}"


def create_python_code_for_input_select_block(block: InputSelectBlock) -> str:
    variable_name = _variable_name(block)
    value = block.metadata.deepnote_variable_value

    if block.metadata.deepnote_allow_multiple_values or isinstance(value, list):
        if isinstance(value, str):
            values = [value] if value else []
        else:
            values = value
        items = ", ".join(escape_python_string(v) for v in values)
        return f"{variable_name} = [{items}]"

    if not value:
        return f"{variable_name} = None"
    return f"{variable_name} = {escape_python_string(value)}"


def create_python_code_for_input_slider_block(block: InputSliderBlock) -> str:
    """Emit the slider value as a bare numeric token.

    The stored text is trusted to be a numeric literal already; anything
    else is passed through unchanged and only logged.
    """
    value = block.metadata.deepnote_variable_value
    if not _NUMERIC_LITERAL_RE.match(value.strip()):
        logger.warning("Slider block %s has non-numeric value %r", block.id, value)
    return f"{_variable_name(block)} = {value}"


def create_python_code_for_input_file_block(block: InputFileBlock) -> str:
    variable_name = _variable_name(block)
    value = block.metadata.deepnote_variable_value
    if not value:
        return f"{variable_name} = None"
    return f"{variable_name} = {escape_python_string(value)}"


def create_python_code_for_input_date_block(block: InputDateBlock) -> str:
    variable_name = _variable_name(block)
    value = block.metadata.deepnote_variable_value

    if not value:
        return f"\n{variable_name} = None\n"

    if (block.metadata.deepnote_input_date_version or 1) >= 2:
        import_line, parse_call = snippets.DATE_PARSE_IMPORT, snippets.DATE_PARSE_CALL
    else:
        import_line, parse_call = snippets.LEGACY_DATE_PARSE_IMPORT, snippets.LEGACY_DATE_PARSE_CALL

    return f"\n{import_line}\n{variable_name} = {parse_call}({escape_python_string(value)}).date()\n"


def _parsed_date_expression(value: str) -> str:
    if not value:
        return "None"
    return f"{snippets.DATE_PARSE_CALL}({escape_python_string(value)}).date()"


def create_python_code_for_input_date_range_block(block: InputDateRangeBlock) -> str:
    """Compile one of the three accepted date-range shapes.

    * ``[start, end]`` of ISO dates, parsed at run time;
    * ``past7days``;
    * ``customDaysN`` for the last N days.
    """
    variable_name = _variable_name(block)
    value = block.metadata.deepnote_variable_value

    if isinstance(value, (list, tuple)):
        if not is_valid_absolute_date_range(value):
            raise InputBlockError(
                f'Date range block "{block.id}" has an invalid date range in field '
                f'"deepnote_variable_value": {list(value)!r}.',
                block_id=block.id,
                field="deepnote_variable_value",
            )
        start, end = value
        return (
            f"{snippets.DATE_PARSE_IMPORT}\n"
            f"{variable_name} = [{_parsed_date_expression(start)}, {_parsed_date_expression(end)}]"
        )

    if value == PAST_7_DAYS:
        return snippets.DATE_RANGE_PAST_7_DAYS.format(variable_name=variable_name)

    days = parse_custom_days(value)
    if days is not None and is_valid_custom_days(days):
        return snippets.DATE_RANGE_CUSTOM_DAYS.format(variable_name=variable_name, days=days)

    raise InputBlockError(
        f'Date range block "{block.id}" has an unsupported value {value!r} in field '
        f'"deepnote_variable_value".',
        block_id=block.id,
        field="deepnote_variable_value",
    )
