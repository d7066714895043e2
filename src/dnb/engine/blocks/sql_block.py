"""SQL blocks: compiled into a call to the runtime's SQL executor."""

from __future__ import annotations

from dnb.engine.schema import BaseBlock, SqlBlock
from dnb.engine.utils import escape_python_string, sanitize_python_variable_name

from . import snippets
from .table_state import create_dataframe_config


def is_sql_block(block: BaseBlock) -> bool:
    return block.type == "sql"


def connection_env_var(integration_id: str | None) -> str:
    """Name of the environment variable holding the integration's credentials.

    ``my-postgres`` becomes ``SQL_MY_POSTGRES``; blocks without an
    integration use the default connection.
    """
    if not integration_id:
        return snippets.DEFAULT_SQL_CONNECTION_ENV_VAR
    return "SQL_" + integration_id.upper().replace("-", "_")


def create_python_code_for_sql_block(block: SqlBlock) -> str:
    metadata = block.metadata
    call = snippets.EXECUTE_SQL.format(
        query=escape_python_string(block.content or ""),
        connection_env_var=escape_python_string(connection_env_var(metadata.sql_integration_id)),
        return_variable_type=metadata.deepnote_return_variable_type or "dataframe",
    )

    if metadata.deepnote_variable_name:
        variable_name = sanitize_python_variable_name(metadata.deepnote_variable_name)
        call = f"{variable_name} = {call}"

    if metadata.deepnote_table_state is not None:
        return f"{create_dataframe_config(metadata.deepnote_table_state)}\n\n{call}"
    return call
