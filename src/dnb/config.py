"""Tool configuration: dnb.yml parsing and defaults."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = "dnb.yml"


class CompileConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    on_error: Literal["fail", "skip"] = "fail"
    # Button variables that evaluate to True when compiling.
    variable_context: list[str] = Field(default_factory=list)
    format: Literal["python", "markdown"] = "python"


class DnbConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    log_level: str = "WARNING"
    compile: CompileConfig = Field(default_factory=CompileConfig)
    project_dir: Path = Field(default_factory=Path.cwd)


def _expand_env_vars(value: Any) -> Any:
    """Expand ${ENV_VAR} references in string values."""
    if isinstance(value, str):
        return re.sub(
            r"\$\{(\w+)\}",
            lambda m: os.environ.get(m.group(1), m.group(0)),
            value,
        )
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(v) for v in value]
    return value


def load_config(project_dir: Path | None = None) -> DnbConfig:
    """Load dnb.yml from the given directory (or cwd).

    A missing or empty file yields the defaults. Anything that is not a
    valid mapping of settings raises ``pydantic.ValidationError``.
    """
    project_dir = Path(project_dir) if project_dir else Path.cwd()
    config_path = project_dir / CONFIG_FILENAME

    if not config_path.exists():
        return DnbConfig(project_dir=project_dir)

    raw = yaml.safe_load(config_path.read_text())
    if raw is None:
        raw = {}
    raw = _expand_env_vars(raw)
    if isinstance(raw, dict):
        raw = _normalize(raw)
        raw["project_dir"] = project_dir

    return DnbConfig.model_validate(raw)


def _normalize(raw: dict) -> dict:
    """Fill in the shorthand forms dnb.yml accepts before validation."""
    raw = dict(raw)
    if raw.get("compile") is None:
        raw.pop("compile", None)
    if isinstance(raw.get("log_level"), int):
        raw["log_level"] = str(raw["log_level"])

    compile_raw = raw.get("compile")
    if isinstance(compile_raw, dict):
        compile_raw = dict(compile_raw)
        variable_context = compile_raw.get("variable_context")
        if variable_context is None:
            compile_raw.pop("variable_context", None)
        elif isinstance(variable_context, str):
            compile_raw["variable_context"] = [variable_context]
        raw["compile"] = compile_raw
    return raw
