"""Serialize dataframe table state into the code/SQL preamble."""

from __future__ import annotations

import json

from dnb.engine.schema import TableState
from dnb.engine.utils import escape_python_string

from . import snippets


def table_state_json(table_state: TableState | None) -> str:
    """Compact JSON for a table state, ``{}`` when there is none.

    Fields that were never set are left out so the runtime applies its own
    defaults for them.
    """
    if table_state is None:
        return "{}"
    data = table_state.model_dump(by_alias=True, exclude_none=True, mode="json")
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def create_dataframe_config(table_state: TableState | None) -> str:
    """Python preamble that hands the table state to the dataframe formatter.

    Whether ``_dntk`` exists is only known when the code runs, so both
    branches are emitted.
    """
    literal = escape_python_string(table_state_json(table_state))
    return snippets.DATAFRAME_CONFIG.format(table_state=literal)
