"""Visualization blocks: a chart built from a dataframe variable and a Vega-Lite spec."""

from __future__ import annotations

import json

from dnb.engine.schema import BaseBlock, VisualizationBlock
from dnb.engine.utils import escape_python_string, sanitize_python_variable_name

from . import snippets
from .errors import VisualizationBlockError, missing_field_error


def is_visualization_block(block: BaseBlock) -> bool:
    return block.type == "visualization"


def _json_literal(value: object) -> str:
    return escape_python_string(json.dumps(value, separators=(",", ":"), ensure_ascii=False))


def create_python_code_for_visualization_block(block: VisualizationBlock) -> str:
    metadata = block.metadata
    if not metadata.deepnote_variable_name:
        raise missing_field_error(VisualizationBlockError, "Visualization", block.id, "deepnote_variable_name")
    if metadata.deepnote_visualization_spec is None:
        raise missing_field_error(
            VisualizationBlockError, "Visualization", block.id, "deepnote_visualization_spec"
        )

    filters = []
    if metadata.deepnote_chart_filter and metadata.deepnote_chart_filter.advanced_filters:
        filters = metadata.deepnote_chart_filter.advanced_filters

    return snippets.EXECUTE_VISUALIZATION.format(
        variable_name=sanitize_python_variable_name(metadata.deepnote_variable_name),
        spec=_json_literal(metadata.deepnote_visualization_spec),
        filters=_json_literal(filters),
    )
