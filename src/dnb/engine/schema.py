"""Document schema: project, notebooks, and typed blocks.

A Deepnote file is a YAML document of this shape::

    version: "1.0.0"
    metadata:
      createdAt: "2025-01-01T00:00:00Z"
    project:
      id: project-123
      name: Sales
      notebooks:
        - id: nb-1
          name: Overview
          blocks:
            - id: block-1
              type: input-text
              sortingKey: a0
              metadata:
                deepnote_variable_name: region
                deepnote_variable_value: EMEA

Blocks form a tagged union on ``type``. Every known kind has its own
metadata model; any other kind is accepted as a ``GenericBlock`` whose
metadata is an open mapping. Metadata models keep unknown keys so that
files written by newer editors survive a load.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, NewType, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)
from pydantic_core import PydanticCustomError

BlockId = NewType("BlockId", str)
NotebookId = NewType("NotebookId", str)
ProjectId = NewType("ProjectId", str)
IntegrationId = NewType("IntegrationId", str)


def is_valid_id(value: Any) -> bool:
    """Ids are opaque, but they must be non-empty strings."""
    return isinstance(value, str) and len(value) > 0


def _single_issue(message: str) -> WrapValidator:
    """Report a failed scalar union as one issue at the field itself.

    Left alone, pydantic reports one error per union member, each under a
    path segment naming the member type.
    """

    def validate(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            raise PydanticCustomError("union_type", message) from None

    return WrapValidator(validate)


StrOrStrList = Annotated[
    Union[str, list[str]],
    _single_issue("Input should be a string or a list of strings"),
]
DateRangeValue = Annotated[
    Union[str, tuple[str, str]],
    _single_issue("Input should be a relative range string or a [start, end] pair of date strings"),
]


# --- Table state (code and SQL blocks) ---


class CellFormattingRule(BaseModel):
    model_config = ConfigDict(extra="allow")
    column: str
    rule: str


class ColumnDisplayName(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    column_name: str = Field(alias="columnName")
    display_name: str = Field(alias="displayName")


class TableFilter(BaseModel):
    model_config = ConfigDict(extra="allow")
    id: str
    value: str


class TableSort(BaseModel):
    model_config = ConfigDict(extra="allow")
    id: str
    desc: bool


class TableState(BaseModel):
    """Display configuration of a dataframe output (filters, sort, paging)."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    cell_formatting_rules: list[CellFormattingRule] | None = Field(default=None, alias="cellFormattingRules")
    column_display_names: list[ColumnDisplayName] | None = Field(default=None, alias="columnDisplayNames")
    column_order: list[str] | None = Field(default=None, alias="columnOrder")
    conditional_filters: list[Any] | None = Field(default=None, alias="conditionalFilters")
    filters: list[TableFilter] | None = None
    hidden_column_ids: list[str] | None = Field(default=None, alias="hiddenColumnIds")
    page_index: int | None = Field(default=None, alias="pageIndex")
    page_size: int | None = Field(default=None, alias="pageSize")
    sort_by: list[TableSort] | None = Field(default=None, alias="sortBy")
    wrapped_text_column_ids: list[str] | None = Field(default=None, alias="wrappedTextColumnIds")


# --- Block metadata ---


class ExecutableBlockMetadata(BaseModel):
    """Execution bookkeeping shared by every block kind that runs code."""
    model_config = ConfigDict(extra="allow")

    execution_context_id: str | None = None
    execution_millis: float | None = None
    execution_start: float | None = None
    is_code_hidden: bool | None = None
    is_output_hidden: bool | None = None
    last_executed_function_notebook_id: str | None = None
    last_function_run_started_at: float | None = None
    source_hash: str | None = None


class CodeBlockMetadata(ExecutableBlockMetadata):
    deepnote_table_state: TableState | None = None


class SqlBlockMetadata(ExecutableBlockMetadata):
    deepnote_return_variable_type: Literal["dataframe", "query_preview"] | None = None
    deepnote_table_state: TableState | None = None
    deepnote_variable_name: str | None = None
    function_export_name: str | None = None
    is_compiled_sql_query_visible: bool | None = None
    sql_integration_id: str | None = None


class InputTextBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    deepnote_variable_value: str


class InputTextareaBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    deepnote_variable_value: str


class InputCheckboxBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    deepnote_variable_value: bool


class InputSelectBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    deepnote_variable_value: StrOrStrList
    deepnote_variable_options: list[str] | None = None
    deepnote_variable_custom_options: list[str] | None = None
    deepnote_variable_selected_variable: str | None = None
    deepnote_variable_select_type: Literal["from_options", "from_variable"] | None = None
    deepnote_allow_multiple_values: bool | None = None


class InputSliderBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    deepnote_variable_value: str
    deepnote_slider_min_value: float | None = None
    deepnote_slider_max_value: float | None = None
    deepnote_slider_step: float | None = None


class InputFileBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    deepnote_variable_value: str


class InputDateBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    deepnote_variable_value: str
    deepnote_input_date_version: int | None = None


class InputDateRangeBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str
    # A [start, end] pair of ISO dates or a relative token such as "past7days".
    deepnote_variable_value: DateRangeValue


class ButtonBlockMetadata(ExecutableBlockMetadata):
    deepnote_button_title: str | None = None
    deepnote_button_color_scheme: str | None = None
    deepnote_button_behavior: Literal["run", "set_variable"] | None = None
    deepnote_variable_name: str | None = None


class ChartFilter(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    advanced_filters: list[Any] | None = Field(default=None, alias="advancedFilters")


class VisualizationBlockMetadata(ExecutableBlockMetadata):
    deepnote_variable_name: str | None = None
    deepnote_visualization_spec: Any = None
    deepnote_chart_filter: ChartFilter | None = None


class BigNumberBlockMetadata(ExecutableBlockMetadata):
    deepnote_big_number_title: str | None = None
    deepnote_big_number_value: str | None = None
    deepnote_big_number_format: str | None = None
    deepnote_big_number_comparison_enabled: bool | None = None
    deepnote_big_number_comparison_title: str | None = None
    deepnote_big_number_comparison_value: str | None = None
    deepnote_big_number_comparison_type: str | None = None
    deepnote_big_number_comparison_format: str | None = None


class FormattedRangeMarks(BaseModel):
    model_config = ConfigDict(extra="allow")
    bold: bool | None = None
    code: bool | None = None
    color: str | None = None
    italic: bool | None = None
    strike: bool | None = None
    underline: bool | None = None


class FormattedRangeText(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    from_code_point: int = Field(alias="fromCodePoint")
    to_code_point: int = Field(alias="toCodePoint")
    marks: FormattedRangeMarks
    type: Literal["marks"] | None = None


class FormattedRangeLink(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    from_code_point: int = Field(alias="fromCodePoint")
    to_code_point: int = Field(alias="toCodePoint")
    ranges: list[FormattedRangeText]
    type: Literal["link"]
    url: str


FORMATTED_RANGE_TAGS = frozenset({"marks", "link"})


def _formatted_range_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    return "link" if kind == "link" else "marks"


FormattedRange = Annotated[
    Union[
        Annotated[FormattedRangeText, Tag("marks")],
        Annotated[FormattedRangeLink, Tag("link")],
    ],
    Discriminator(_formatted_range_tag),
]


class TextBlockMetadata(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    formatted_ranges: list[FormattedRange] | None = Field(
        default=None, alias="formattedRanges"
    )
    is_collapsed: bool | None = None


class TodoTextBlockMetadata(TextBlockMetadata):
    checked: bool | None = None


class CalloutTextBlockMetadata(TextBlockMetadata):
    color: Literal["blue", "green", "yellow", "red", "purple"] | None = None


class ImageBlockMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")
    deepnote_img_src: str | None = None
    deepnote_img_width: str | None = None
    deepnote_img_alignment: str | None = None


class MarkdownBlockMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")
    deepnote_cell_height: float | None = None


class SeparatorBlockMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")


# --- Blocks ---


class BlockOutput(BaseModel):
    """A prior execution result. Opaque to the compilers."""
    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    name: str | None = None
    output_type: str | None = None
    text: StrOrStrList | None = None


class BaseBlock(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: BlockId
    type: str
    sorting_key: str = Field(alias="sortingKey")
    block_group: str | None = Field(default=None, alias="blockGroup")
    content: str | None = None
    execution_count: int | None = Field(default=None, alias="executionCount")
    outputs: list[BlockOutput] | None = None
    version: int | None = None


class CodeBlock(BaseBlock):
    type: Literal["code"]
    metadata: CodeBlockMetadata = Field(default_factory=CodeBlockMetadata)


class SqlBlock(BaseBlock):
    type: Literal["sql"]
    metadata: SqlBlockMetadata = Field(default_factory=SqlBlockMetadata)


class InputTextBlock(BaseBlock):
    type: Literal["input-text"]
    metadata: InputTextBlockMetadata


class InputTextareaBlock(BaseBlock):
    type: Literal["input-textarea"]
    metadata: InputTextareaBlockMetadata


class InputCheckboxBlock(BaseBlock):
    type: Literal["input-checkbox"]
    metadata: InputCheckboxBlockMetadata


class InputSelectBlock(BaseBlock):
    type: Literal["input-select"]
    metadata: InputSelectBlockMetadata


class InputSliderBlock(BaseBlock):
    type: Literal["input-slider"]
    metadata: InputSliderBlockMetadata


class InputFileBlock(BaseBlock):
    type: Literal["input-file"]
    metadata: InputFileBlockMetadata


class InputDateBlock(BaseBlock):
    type: Literal["input-date"]
    metadata: InputDateBlockMetadata


class InputDateRangeBlock(BaseBlock):
    type: Literal["input-date-range"]
    metadata: InputDateRangeBlockMetadata


class ButtonBlock(BaseBlock):
    type: Literal["button"]
    metadata: ButtonBlockMetadata = Field(default_factory=ButtonBlockMetadata)


class VisualizationBlock(BaseBlock):
    type: Literal["visualization"]
    metadata: VisualizationBlockMetadata = Field(default_factory=VisualizationBlockMetadata)


class BigNumberBlock(BaseBlock):
    type: Literal["big-number"]
    metadata: BigNumberBlockMetadata = Field(default_factory=BigNumberBlockMetadata)


class TextBlock(BaseBlock):
    type: Literal["text-cell-p", "text-cell-h1", "text-cell-h2", "text-cell-h3", "text-cell-bullet"]
    metadata: TextBlockMetadata = Field(default_factory=TextBlockMetadata)


class TodoTextBlock(BaseBlock):
    type: Literal["text-cell-todo"]
    metadata: TodoTextBlockMetadata = Field(default_factory=TodoTextBlockMetadata)


class CalloutTextBlock(BaseBlock):
    type: Literal["text-cell-callout"]
    metadata: CalloutTextBlockMetadata = Field(default_factory=CalloutTextBlockMetadata)


class ImageBlock(BaseBlock):
    type: Literal["image"]
    metadata: ImageBlockMetadata = Field(default_factory=ImageBlockMetadata)


class MarkdownBlock(BaseBlock):
    type: Literal["markdown"]
    metadata: MarkdownBlockMetadata = Field(default_factory=MarkdownBlockMetadata)


class SeparatorBlock(BaseBlock):
    type: Literal["separator"]
    metadata: SeparatorBlockMetadata = Field(default_factory=SeparatorBlockMetadata)


class GenericBlock(BaseBlock):
    """Any block kind without a dedicated model."""
    metadata: dict[str, Any] = Field(default_factory=dict)


BLOCK_MODELS: dict[str, type[BaseBlock]] = {
    "code": CodeBlock,
    "sql": SqlBlock,
    "input-text": InputTextBlock,
    "input-textarea": InputTextareaBlock,
    "input-checkbox": InputCheckboxBlock,
    "input-select": InputSelectBlock,
    "input-slider": InputSliderBlock,
    "input-file": InputFileBlock,
    "input-date": InputDateBlock,
    "input-date-range": InputDateRangeBlock,
    "button": ButtonBlock,
    "visualization": VisualizationBlock,
    "big-number": BigNumberBlock,
    "text-cell-p": TextBlock,
    "text-cell-h1": TextBlock,
    "text-cell-h2": TextBlock,
    "text-cell-h3": TextBlock,
    "text-cell-bullet": TextBlock,
    "text-cell-todo": TodoTextBlock,
    "text-cell-callout": CalloutTextBlock,
    "image": ImageBlock,
    "markdown": MarkdownBlock,
    "separator": SeparatorBlock,
}

GENERIC_BLOCK_TAG = "generic"

# Union arm names. Pydantic puts the chosen arm into error locations.
BLOCK_TAGS = frozenset(BLOCK_MODELS) | {GENERIC_BLOCK_TAG}


def _block_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    if isinstance(kind, str) and kind in BLOCK_MODELS:
        return kind
    return GENERIC_BLOCK_TAG


Block = Annotated[
    Union[
        tuple(Annotated[model, Tag(kind)] for kind, model in BLOCK_MODELS.items())
        + (Annotated[GenericBlock, Tag(GENERIC_BLOCK_TAG)],)
    ],
    Discriminator(_block_tag),
]


# --- Project ---


class Notebook(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: NotebookId
    name: str
    blocks: list[Block]
    execution_mode: Literal["block", "downstream"] | None = Field(default=None, alias="executionMode")
    is_module: bool | None = Field(default=None, alias="isModule")
    working_directory: str | None = Field(default=None, alias="workingDirectory")


class Integration(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: IntegrationId
    name: str
    type: str


class EnvironmentSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    custom_image: str | None = Field(default=None, alias="customImage")
    python_version: str | None = Field(default=None, alias="pythonVersion")


class ProjectSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    environment: EnvironmentSettings | None = None
    requirements: list[str] | None = None
    sql_cache_max_age: float | None = Field(default=None, alias="sqlCacheMaxAge")


class Project(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: ProjectId
    name: str
    notebooks: list[Notebook]
    init_notebook_id: NotebookId | None = Field(default=None, alias="initNotebookId")
    integrations: list[Integration] | None = None
    settings: ProjectSettings | None = None


class FileMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    created_at: str = Field(alias="createdAt")
    exported_at: str | None = Field(default=None, alias="exportedAt")
    modified_at: str | None = Field(default=None, alias="modifiedAt")
    checksum: str | None = None


class DeepnoteFile(BaseModel):
    """A whole Deepnote project file."""
    model_config = ConfigDict(extra="ignore")

    version: str
    metadata: FileMetadata
    project: Project


_BLOCK_ADAPTER: TypeAdapter[Any] = TypeAdapter(Block)


def parse_block(data: Any) -> BaseBlock:
    """Validate a single block mapping into its typed model."""
    return _BLOCK_ADAPTER.validate_python(data)
