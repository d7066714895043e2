"""Tests for visualization, button and big number blocks."""

import pytest

from dnb.engine.blocks.big_number_block import (
    create_python_code_for_big_number_block,
    has_template_syntax,
)
from dnb.engine.blocks.button_block import (
    ButtonExecutionContext,
    create_python_code_for_button_block,
)
from dnb.engine.blocks.errors import ButtonBlockError, VisualizationBlockError
from dnb.engine.blocks.visualization_block import create_python_code_for_visualization_block
from dnb.engine.schema import parse_block


def _block(kind, **metadata):
    return parse_block({"id": f"{kind}-1", "type": kind, "sortingKey": "a0", "metadata": metadata})


# ---------------------------------------------------------------------------
# Visualization
# ---------------------------------------------------------------------------


class TestVisualization:
    def test_chart_call(self):
        block = _block(
            "visualization",
            deepnote_variable_name="sales_df",
            deepnote_visualization_spec={"mark": "bar"},
        )
        assert create_python_code_for_visualization_block(block) == (
            "_dntk.DeepnoteChart(sales_df, '{\"mark\":\"bar\"}', attach_selection=True, filters='[]')"
        )

    def test_filters(self):
        block = _block(
            "visualization",
            deepnote_variable_name="df",
            deepnote_visualization_spec={},
            deepnote_chart_filter={"advancedFilters": [{"column": "region", "value": "EMEA"}]},
        )
        code = create_python_code_for_visualization_block(block)
        assert code.endswith("filters='[{\"column\":\"region\",\"value\":\"EMEA\"}]')")

    def test_spec_quotes_are_escaped(self):
        block = _block(
            "visualization",
            deepnote_variable_name="df",
            deepnote_visualization_spec={"title": "Year's sales"},
        )
        assert "'{\"title\":\"Year\\'s sales\"}'" in create_python_code_for_visualization_block(block)

    def test_missing_variable_name(self):
        block = _block("visualization", deepnote_visualization_spec={"mark": "bar"})
        with pytest.raises(VisualizationBlockError) as exc_info:
            create_python_code_for_visualization_block(block)
        assert str(exc_info.value) == (
            'Visualization block "visualization-1" is missing required field "deepnote_variable_name".'
        )
        assert exc_info.value.field == "deepnote_variable_name"

    def test_missing_spec(self):
        block = _block("visualization", deepnote_variable_name="df")
        with pytest.raises(VisualizationBlockError, match="deepnote_visualization_spec"):
            create_python_code_for_visualization_block(block)


# ---------------------------------------------------------------------------
# Button
# ---------------------------------------------------------------------------


class TestButton:
    def test_not_clicked(self):
        block = _block("button", deepnote_button_behavior="set_variable", deepnote_variable_name="my-button-name")
        assert create_python_code_for_button_block(block) == "mybuttonname = False"

    def test_clicked(self):
        block = _block("button", deepnote_button_behavior="set_variable", deepnote_variable_name="my-button-name")
        context = ButtonExecutionContext(variable_context=("mybuttonname",))
        assert create_python_code_for_button_block(block, context) == "mybuttonname = True"

    def test_other_button_clicked(self):
        block = _block("button", deepnote_button_behavior="set_variable", deepnote_variable_name="export")
        context = ButtonExecutionContext(variable_context=("refresh",))
        assert create_python_code_for_button_block(block, context) == "export = False"

    def test_run_behavior_is_empty(self):
        block = _block("button", deepnote_button_behavior="run", deepnote_variable_name="x")
        assert create_python_code_for_button_block(block) == ""

    def test_no_behavior_is_empty(self):
        assert create_python_code_for_button_block(_block("button")) == ""

    def test_set_variable_without_name(self):
        block = _block("button", deepnote_button_behavior="set_variable")
        with pytest.raises(ButtonBlockError, match="deepnote_variable_name") as exc_info:
            create_python_code_for_button_block(block)
        assert exc_info.value.block_id == "button-1"

    def test_context_membership(self):
        context = ButtonExecutionContext(variable_context=("a", "b"))
        assert "a" in context
        assert "c" not in context
        assert "a" not in ButtonExecutionContext()


# ---------------------------------------------------------------------------
# Big number
# ---------------------------------------------------------------------------


class TestBigNumber:
    def test_title_and_value(self):
        block = _block("big-number", deepnote_big_number_title="Revenue", deepnote_big_number_value="total_revenue")
        code = create_python_code_for_big_number_block(block)
        assert code.startswith("def __deepnote_big_number__():\n")
        assert '        "title": \'Revenue\',\n' in code
        assert '        "value": f"{total_revenue}",\n' in code
        assert "comparisonTitle" not in code
        assert code.endswith("\n__deepnote_big_number__()\n")

    def test_helper_renders_with_jinja(self):
        code = create_python_code_for_big_number_block(_block("big-number"))
        assert "    import jinja2\n" in code
        assert "    def render_template(template):\n" in code
        assert "    return json.dumps({\n" in code

    def test_templated_title(self):
        block = _block(
            "big-number",
            deepnote_big_number_title="Revenue in {{ region }}",
            deepnote_big_number_value="rev",
        )
        code = create_python_code_for_big_number_block(block)
        assert '"title": render_template(\'Revenue in {{ region }}\'),' in code

    def test_value_is_sanitized(self):
        block = _block("big-number", deepnote_big_number_title="T", deepnote_big_number_value="total revenue")
        assert '"value": f"{total_revenue}",' in create_python_code_for_big_number_block(block)

    def test_comparison(self):
        block = _block(
            "big-number",
            deepnote_big_number_title="Revenue",
            deepnote_big_number_value="rev",
            deepnote_big_number_comparison_title="vs last month",
            deepnote_big_number_comparison_value="rev_prev",
        )
        code = create_python_code_for_big_number_block(block)
        assert '        "comparisonTitle": \'vs last month\',\n' in code
        assert '        "comparisonValue": f"{rev_prev}",\n' in code

    def test_comparison_title_only(self):
        block = _block("big-number", deepnote_big_number_comparison_title="vs target")
        assert '"comparisonValue": None,' in create_python_code_for_big_number_block(block)

    @pytest.mark.parametrize("text,expected", [
        ("{{ x }}", True),
        ("{% if x %}y{% endif %}", True),
        ("plain", False),
        ("{ x }", False),
    ])
    def test_has_template_syntax(self, text, expected):
        assert has_template_syntax(text) is expected
