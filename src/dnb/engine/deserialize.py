"""Load a Deepnote YAML file and validate it against the document schema."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from dnb.engine.schema import BLOCK_TAGS, FORMATTED_RANGE_TAGS, DeepnoteFile

logger = logging.getLogger("dnb.deserialize")

PathSegment = str | int


class _DocumentLoader(yaml.SafeLoader):
    """SafeLoader that leaves ISO dates and timestamps as plain strings.

    Dates such as ``createdAt`` or a date input's value are typed as strings
    in the schema, and YAML 1.1 would otherwise turn them into ``datetime``.
    """


_DocumentLoader.yaml_implicit_resolvers = {
    first_char: [
        (tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class SchemaIssue:
    """A single structural problem, addressed by its path in the document."""

    path: tuple[PathSegment, ...]
    message: str
    code: str = "custom"


class DeepnoteFileParseError(ValueError):
    """Raised when a Deepnote file does not match the document schema.

    ``issues`` holds every problem found. The message lists the first few,
    each with a hint pointing at the offending block or notebook.
    """

    MAX_ISSUES_TO_SHOW = 5

    def __init__(self, issues: Sequence[SchemaIssue]) -> None:
        self.issues = list(issues)
        super().__init__(f"Failed to parse the Deepnote file:\n{self.format_issues(self.issues)}")

    @classmethod
    def format_issues(cls, issues: Sequence[SchemaIssue]) -> str:
        display_issues = issues[: cls.MAX_ISSUES_TO_SHOW]
        remaining = len(issues) - len(display_issues)

        lines = []
        for index, issue in enumerate(display_issues, start=1):
            path = _join_path(issue.path) or "(root)"
            lines.append(f"  {index}. [{path}] {issue.message}{cls.location_hint(issue)}")

        if remaining > 0:
            lines.append(f"  ... and {remaining} more issue(s)")

        return "\n".join(lines)

    @staticmethod
    def location_hint(issue: SchemaIssue) -> str:
        """Point at the block (or failing that, the notebook) an issue belongs to."""
        for segment, label in (("blocks", "block"), ("notebooks", "notebook")):
            index = _index_after(issue.path, segment)
            if index is not None:
                return f" ({label} index: {index})"
        return ""

    @property
    def first_issue_message(self) -> str:
        if not self.issues:
            return "Invalid Deepnote file"
        issue = self.issues[0]
        path = _join_path(issue.path)
        return f"{path}: {issue.message}" if path else issue.message


def _join_path(path: Sequence[PathSegment]) -> str:
    return ".".join(str(segment) for segment in path)


def _index_after(path: Sequence[PathSegment], segment: str) -> int | None:
    if segment not in path:
        return None
    position = list(path).index(segment)
    if position + 1 < len(path):
        candidate = path[position + 1]
        if isinstance(candidate, int) and not isinstance(candidate, bool):
            return candidate
    return None


# Tagged unions whose arm tag pydantic inserts after ``<field>.<i>``.
_UNION_TAGS = {"blocks": BLOCK_TAGS, "formattedRanges": FORMATTED_RANGE_TAGS}


def _issue_path(loc: Sequence[PathSegment]) -> tuple[PathSegment, ...]:
    """Drop the union arm tags pydantic inserts into list item locations."""
    path: list[PathSegment] = []
    for i, segment in enumerate(loc):
        if i >= 2 and _is_index(loc[i - 1]):
            tags = _UNION_TAGS.get(loc[i - 2]) if isinstance(loc[i - 2], str) else None
            if tags is not None and segment in tags:
                continue
        path.append(segment)
    return tuple(path)


def _is_index(segment: PathSegment) -> bool:
    return isinstance(segment, int) and not isinstance(segment, bool)


def issues_from_validation_error(error: ValidationError) -> list[SchemaIssue]:
    return [
        SchemaIssue(path=_issue_path(detail["loc"]), message=detail["msg"], code=detail["type"])
        for detail in error.errors()
    ]


def parse_yaml(content: str) -> Any:
    """Parse YAML text. Syntax errors propagate as ``yaml.YAMLError``."""
    return yaml.load(content, Loader=_DocumentLoader)


def validate_deepnote_file(data: Any) -> DeepnoteFile:
    """Validate an already-parsed document, collecting every schema issue."""
    try:
        return DeepnoteFile.model_validate(data)
    except ValidationError as e:
        issues = issues_from_validation_error(e)
        logger.debug("Deepnote file failed validation with %d issue(s)", len(issues))
        raise DeepnoteFileParseError(issues) from e


def deserialize_deepnote_file(content: str) -> DeepnoteFile:
    """Deserialize a YAML string into a validated ``DeepnoteFile``.

    Raises:
        yaml.YAMLError: if the text is not well-formed YAML.
        DeepnoteFileParseError: if the document does not match the schema.
    """
    parsed = parse_yaml(content)
    return validate_deepnote_file(parsed)
