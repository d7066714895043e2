"""Tests for loading and validating Deepnote files."""

import textwrap

import pytest
import yaml

from dnb.engine.deserialize import (
    DeepnoteFileParseError,
    SchemaIssue,
    deserialize_deepnote_file,
    parse_yaml,
    validate_deepnote_file,
)
from dnb.engine.schema import (
    CodeBlock,
    FormattedRangeLink,
    FormattedRangeText,
    GenericBlock,
    InputSelectBlock,
    TodoTextBlock,
    is_valid_id,
    parse_block,
)

VALID_FILE = textwrap.dedent("""\
    version: "1.0.0"
    metadata:
      createdAt: 2025-01-15T10:00:00Z
    project:
      id: project-1
      name: Sales analysis
      initNotebookId: nb-init
      integrations:
        - id: warehouse
          name: Warehouse
          type: pgsql
      notebooks:
        - id: nb-init
          name: Init
          executionMode: block
          blocks:
            - id: b-code
              type: code
              sortingKey: a0
              content: "import pandas as pd"
              metadata:
                custom_editor_flag: true
        - id: nb-main
          name: Main
          blocks:
            - id: b-select
              type: input-select
              sortingKey: a0
              metadata:
                deepnote_variable_name: regions
                deepnote_variable_value: [EMEA, APAC]
                deepnote_allow_multiple_values: true
            - id: b-todo
              type: text-cell-todo
              sortingKey: a1
              content: Check numbers
              metadata:
                checked: true
            - id: b-future
              type: some-future-kind
              sortingKey: a2
              metadata:
                anything: goes
""")


def _document(blocks_yaml: str) -> str:
    return textwrap.dedent("""\
        version: "1.0.0"
        metadata:
          createdAt: "2025-01-15T10:00:00Z"
        project:
          id: project-1
          name: Test
          notebooks:
            - id: nb-1
              name: First
              blocks:
        """) + textwrap.indent(textwrap.dedent(blocks_yaml), " " * 8)


class TestDeserializeValid:
    def test_structure(self):
        document = deserialize_deepnote_file(VALID_FILE)
        assert document.version == "1.0.0"
        assert document.project.name == "Sales analysis"
        assert document.project.init_notebook_id == "nb-init"
        assert [nb.name for nb in document.project.notebooks] == ["Init", "Main"]
        assert document.project.notebooks[0].execution_mode == "block"
        assert document.project.integrations[0].type == "pgsql"

    def test_timestamps_stay_strings(self):
        document = deserialize_deepnote_file(VALID_FILE)
        assert document.metadata.created_at == "2025-01-15T10:00:00Z"

    def test_blocks_are_typed_by_kind(self):
        document = deserialize_deepnote_file(VALID_FILE)
        code = document.project.notebooks[0].blocks[0]
        select, todo, future = document.project.notebooks[1].blocks

        assert isinstance(code, CodeBlock)
        assert isinstance(select, InputSelectBlock)
        assert select.metadata.deepnote_variable_value == ["EMEA", "APAC"]
        assert isinstance(todo, TodoTextBlock)
        assert todo.metadata.checked is True

    def test_unknown_kind_is_generic(self):
        document = deserialize_deepnote_file(VALID_FILE)
        future = document.project.notebooks[1].blocks[2]
        assert isinstance(future, GenericBlock)
        assert future.type == "some-future-kind"
        assert future.metadata == {"anything": "goes"}

    def test_unknown_metadata_keys_are_kept(self):
        document = deserialize_deepnote_file(VALID_FILE)
        code = document.project.notebooks[0].blocks[0]
        assert code.metadata.model_extra == {"custom_editor_flag": True}

    def test_sorting_key_alias(self):
        document = deserialize_deepnote_file(VALID_FILE)
        assert document.project.notebooks[1].blocks[1].sorting_key == "a1"


class TestDeserializeInvalid:
    def test_yaml_syntax_error_propagates(self):
        with pytest.raises(yaml.YAMLError):
            deserialize_deepnote_file("project: [unclosed")

    def test_empty_document(self):
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file("")
        error = exc_info.value
        assert len(error.issues) == 1
        assert error.issues[0].path == ()
        assert "[(root)]" in str(error)
        assert error.first_issue_message == error.issues[0].message

    def test_missing_project_name(self):
        content = VALID_FILE.replace("  name: Sales analysis\n", "")
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        error = exc_info.value
        assert [issue.path for issue in error.issues] == [("project", "name")]
        assert str(error).startswith("Failed to parse the Deepnote file:\n  1. [project.name] ")
        assert error.first_issue_message.startswith("project.name: ")

    def test_block_issue_has_block_hint(self):
        content = _document("""\
            - id: b-1
              type: code
              sortingKey: a0
            - id: b-2
              type: code
        """)
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        error = exc_info.value
        assert len(error.issues) == 1
        issue = error.issues[0]
        # The union arm name is not part of the reported path.
        assert issue.path == ("project", "notebooks", 0, "blocks", 1, "sortingKey")
        assert issue.code == "missing"
        assert "(block index: 1)" in str(error)

    def test_input_block_requires_metadata(self):
        content = _document("""\
            - id: b-1
              type: input-text
              sortingKey: a0
        """)
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        paths = [issue.path for issue in exc_info.value.issues]
        assert ("project", "notebooks", 0, "blocks", 0, "metadata") in paths

    def test_block_without_type(self):
        content = _document("""\
            - id: b-1
              sortingKey: a0
        """)
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        paths = [issue.path for issue in exc_info.value.issues]
        assert paths == [("project", "notebooks", 0, "blocks", 0, "type")]

    def test_notebook_issue_has_notebook_hint(self):
        content = VALID_FILE.replace("      name: Main\n", "")
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        error = exc_info.value
        assert error.issues[0].path == ("project", "notebooks", 1, "name")
        assert "(notebook index: 1)" in str(error)

    def test_all_issues_collected(self):
        content = _document("""\
            - id: b-1
              type: code
            - id: b-2
              type: sql
            - id: b-3
              type: markdown
        """)
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        assert len(exc_info.value.issues) == 3

    def test_bad_union_value_is_one_issue_per_field(self):
        content = _document("""\
            - id: b-1
              type: input-select
              sortingKey: a0
              metadata:
                deepnote_variable_name: region
                deepnote_variable_value: 5
            - id: b-2
              type: input-date-range
              sortingKey: a1
              metadata:
                deepnote_variable_name: period
                deepnote_variable_value: 5
        """)
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        issues = exc_info.value.issues
        assert [issue.path for issue in issues] == [
            ("project", "notebooks", 0, "blocks", 0, "metadata", "deepnote_variable_value"),
            ("project", "notebooks", 0, "blocks", 1, "metadata", "deepnote_variable_value"),
        ]
        assert [issue.code for issue in issues] == ["union_type", "union_type"]
        assert issues[0].message == "Input should be a string or a list of strings"

    def test_bad_output_text(self):
        content = _document("""\
            - id: b-1
              type: code
              sortingKey: a0
              outputs:
                - output_type: stream
                  text: 5
        """)
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        paths = [issue.path for issue in exc_info.value.issues]
        assert paths == [("project", "notebooks", 0, "blocks", 0, "outputs", 0, "text")]

    def test_formatted_range_issue_path(self):
        content = _document("""\
            - id: b-1
              type: text-cell-p
              sortingKey: a0
              content: Hello
              metadata:
                formattedRanges:
                  - fromCodePoint: 0
                    marks: {bold: true}
                  - type: link
                    fromCodePoint: 0
                    toCodePoint: 5
                    ranges: []
        """)
        with pytest.raises(DeepnoteFileParseError) as exc_info:
            deserialize_deepnote_file(content)
        prefix = ("project", "notebooks", 0, "blocks", 0, "metadata", "formattedRanges")
        paths = [issue.path for issue in exc_info.value.issues]
        assert paths == [prefix + (0, "toCodePoint"), prefix + (1, "url")]

    def test_formatted_ranges_by_kind(self):
        content = _document("""\
            - id: b-1
              type: text-cell-p
              sortingKey: a0
              content: Hello
              metadata:
                formattedRanges:
                  - fromCodePoint: 0
                    toCodePoint: 2
                    marks: {bold: true}
                  - type: link
                    fromCodePoint: 0
                    toCodePoint: 5
                    url: https://example.com
                    ranges: []
        """)
        block = deserialize_deepnote_file(content).project.notebooks[0].blocks[0]
        marks, link = block.metadata.formatted_ranges
        assert isinstance(marks, FormattedRangeText)
        assert marks.marks.bold is True
        assert isinstance(link, FormattedRangeLink)
        assert link.url == "https://example.com"


class TestParseErrorFormatting:
    def _issues(self, count):
        return [
            SchemaIssue(path=("project", "notebooks", 0, "blocks", i, "id"), message="Field required")
            for i in range(count)
        ]

    def test_truncates_after_five(self):
        error = DeepnoteFileParseError(self._issues(7))
        lines = str(error).splitlines()
        assert lines[0] == "Failed to parse the Deepnote file:"
        assert lines[1] == "  1. [project.notebooks.0.blocks.0.id] Field required (block index: 0)"
        assert lines[5].startswith("  5. ")
        assert lines[6] == "  ... and 2 more issue(s)"
        assert len(lines) == 7
        assert len(error.issues) == 7

    def test_exactly_five_has_no_remainder(self):
        error = DeepnoteFileParseError(self._issues(5))
        assert "more issue(s)" not in str(error)

    def test_no_issues(self):
        error = DeepnoteFileParseError([])
        assert error.first_issue_message == "Invalid Deepnote file"

    def test_location_hint_prefers_block(self):
        issue = SchemaIssue(path=("project", "notebooks", 2, "blocks", 4, "type"), message="bad")
        assert DeepnoteFileParseError.location_hint(issue) == " (block index: 4)"

    def test_location_hint_notebook(self):
        issue = SchemaIssue(path=("project", "notebooks", 2, "name"), message="bad")
        assert DeepnoteFileParseError.location_hint(issue) == " (notebook index: 2)"

    def test_location_hint_needs_integer_index(self):
        issue = SchemaIssue(path=("project", "blocks"), message="bad")
        assert DeepnoteFileParseError.location_hint(issue) == ""

    def test_is_value_error(self):
        assert isinstance(DeepnoteFileParseError([]), ValueError)


def test_validate_parsed_data():
    data = parse_yaml(VALID_FILE)
    assert isinstance(data["metadata"]["createdAt"], str)
    document = validate_deepnote_file(data)
    assert document.project.id == "project-1"


def test_parse_single_block():
    block = parse_block({"id": "b", "type": "code", "sortingKey": "0", "content": "x = 1"})
    assert isinstance(block, CodeBlock)
    assert block.content == "x = 1"


def test_is_valid_id():
    assert is_valid_id("abc")
    assert not is_valid_id("")
    assert not is_valid_id(None)
    assert not is_valid_id(42)
