"""Big number blocks: a KPI tile rendered from live variables."""

from __future__ import annotations

import re

from dnb.engine.schema import BaseBlock, BigNumberBlock
from dnb.engine.utils import escape_python_string, sanitize_python_variable_name

from . import snippets

_TEMPLATE_SYNTAX_RE = re.compile(r"\{\{.*?\}\}|\{%.*?%\}", re.DOTALL)


def is_big_number_block(block: BaseBlock) -> bool:
    return block.type == "big-number"


def has_template_syntax(text: str) -> bool:
    return bool(_TEMPLATE_SYNTAX_RE.search(text))


def _title_expression(title: str | None) -> str:
    """A title literal, rendered through Jinja when it contains a template."""
    literal = escape_python_string(title or "")
    if title and has_template_syntax(title):
        return f"render_template({literal})"
    return literal


def _value_expression(value: str | None) -> str:
    # Interpolated as a live expression, not a literal.
    return 'f"{' + sanitize_python_variable_name(value or "") + '}"'


def create_python_code_for_big_number_block(block: BigNumberBlock) -> str:
    metadata = block.metadata
    fields = [
        ("title", _title_expression(metadata.deepnote_big_number_title)),
        ("value", _value_expression(metadata.deepnote_big_number_value)),
    ]

    comparison_title = metadata.deepnote_big_number_comparison_title
    comparison_value = metadata.deepnote_big_number_comparison_value
    if comparison_title or comparison_value:
        fields.append(("comparisonTitle", _title_expression(comparison_title)))
        fields.append((
            "comparisonValue",
            _value_expression(comparison_value) if comparison_value else "None",
        ))

    return snippets.BIG_NUMBER.format(
        fields="\n".join(
            snippets.BIG_NUMBER_FIELD.format(key=key, expression=expression)
            for key, expression in fields
        )
    )
