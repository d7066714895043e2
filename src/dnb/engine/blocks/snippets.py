"""Python source templates emitted by the block compilers.

These are string constants filled in with ``str.format``; every value
substituted in must already be a sanitized identifier or an escaped
literal. ``_dntk`` is the runtime helper object the executing kernel
injects into the notebook namespace.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Dataframe display configuration (code and SQL blocks)
# ---------------------------------------------------------------------------

DATAFRAME_CONFIG = """\
if '_dntk' in globals():
  _dntk.dataframe_utils.configure_dataframe_formatter({table_state})
else:
  _deepnote_current_table_attrs = {table_state}"""

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

EXECUTE_SQL = """\
_dntk.execute_sql(
  {query},
  {connection_env_var},
  audit_sql_comment='',
  sql_cache_mode='cache_disabled',
  return_variable_type='{return_variable_type}'
)"""

DEFAULT_SQL_CONNECTION_ENV_VAR = "SQL_ALCHEMY_JSON_ENV_VAR"

# ---------------------------------------------------------------------------
# Visualization
# ---------------------------------------------------------------------------

EXECUTE_VISUALIZATION = (
    "_dntk.DeepnoteChart({variable_name}, {spec}, attach_selection=True, filters={filters})"
)

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

DATE_PARSE_IMPORT = "from dateutil.parser import parse as _deepnote_parse"
DATE_PARSE_CALL = "_deepnote_parse"

# Spelling used by date inputs created before deepnote_input_date_version 2.
LEGACY_DATE_PARSE_IMPORT = "import dateutil.parser as _deepnote_dateutil_parser"
LEGACY_DATE_PARSE_CALL = "_deepnote_dateutil_parser.parse"

DATE_RANGE_PAST_7_DAYS = """\
from datetime import datetime as _deepnote_datetime, timedelta as _deepnote_timedelta
{variable_name} = [_deepnote_datetime.now().date() - _deepnote_timedelta(days=7), _deepnote_datetime.now().date()]"""

DATE_RANGE_CUSTOM_DAYS = """\
from datetime import datetime, timedelta
{variable_name} = [datetime.now().date() - timedelta(days={days}), datetime.now().date()]"""

# ---------------------------------------------------------------------------
# Big number
# ---------------------------------------------------------------------------

BIG_NUMBER = """\
def __deepnote_big_number__():
    import json
    import jinja2
    from jinja2 import meta

    def render_template(template):
        parsed_content = jinja2.Environment().parse(template)
        required_variables = meta.find_undeclared_variables(parsed_content)
        context = {{
            variable_name: globals().get(variable_name)
            for variable_name in required_variables
        }}
        return jinja2.Environment().from_string(template).render(context)

    return json.dumps({{
{fields}
    }})

__deepnote_big_number__()
"""

BIG_NUMBER_FIELD = '        "{key}": {expression},'
