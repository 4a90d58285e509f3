"""
Configuration loader for the lab grader.

Handles parsing and validation of the optional YAML configuration file and
the GitHub Actions environment variables.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .config import (
    BOT_SIGNALS,
    DEFAULT_ARTIFACTS_DIR,
    DEFAULT_STUDENT_ID,
    DUE_ISO,
    NODE_EXECUTABLE,
    SANDBOX_TIMEOUT_MS,
)


class GraderConfig(BaseModel):
    """
    Configuration model for the grader.
    """
    repo_dir: Path = Field(Path("."), description="Path to the student repository")
    artifacts_dir: Path = Field(DEFAULT_ARTIFACTS_DIR, description="Where grade.csv and feedback are written")
    deadline: datetime = Field(datetime.fromisoformat(DUE_ISO), description="Submission deadline (timezone-aware)")
    bot_signals: list[str] = Field(default_factory=lambda: list(BOT_SIGNALS), description="Substrings marking automation commits")
    sandbox_timeout_ms: int = Field(SANDBOX_TIMEOUT_MS, gt=0, description="Execution budget for the sandboxed run")
    node_executable: str = Field(NODE_EXECUTABLE, description="Node binary used by the sandbox")
    skip_execution: bool = Field(False, description="Grade statically only")
    student_id: Optional[str] = Field(None, description="Student identifier (derived from the environment if unset)")
    step_summary_path: Optional[Path] = Field(None, description="GitHub step summary file to append feedback to")
    verbose: bool = Field(False, description="Enable verbose output")

    @field_validator("deadline")
    @classmethod
    def _deadline_has_offset(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("deadline must include a UTC offset, e.g. 2025-09-17T23:59:00+03:00")
        return value


def get_student_id(environ: Mapping[str, str]) -> str:
    """
    Derive the student identifier from the CI environment.

    Order: STUDENT_USERNAME, the suffix after the last "-" of the repository
    name (Classroom repos end with the username), GITHUB_ACTOR, the
    repository name, then a fixed default.
    """
    repo_full = environ.get("GITHUB_REPOSITORY", "")
    repo_name = repo_full.split("/")[1] if "/" in repo_full else repo_full
    from_repo_suffix = repo_name.split("-")[-1] if "-" in repo_name else ""

    return (
        environ.get("STUDENT_USERNAME")
        or from_repo_suffix
        or environ.get("GITHUB_ACTOR")
        or repo_name
        or DEFAULT_STUDENT_ID
    )


def apply_environment(config: GraderConfig, environ: Mapping[str, str] | None = None) -> GraderConfig:
    """
    Fill unset fields from environment variables.

    Args:
        config: Loaded configuration.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        A copy of the configuration with student_id and step_summary_path set
        where the environment provides them.
    """
    environ = os.environ if environ is None else environ
    updates: dict = {}
    if not config.student_id:
        updates["student_id"] = get_student_id(environ)
    if config.step_summary_path is None and environ.get("GITHUB_STEP_SUMMARY"):
        updates["step_summary_path"] = Path(environ["GITHUB_STEP_SUMMARY"])
    return config.model_copy(update=updates)


def load_config(config_path: Path | None) -> GraderConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.

    Returns:
        GraderConfig object with loaded values.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
        ValidationError: If config data is invalid.
    """
    if config_path is None:
        return GraderConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        return GraderConfig()

    # Resolve relative paths relative to the config file location
    config_dir = config_path.parent
    for path_field in ["repo_dir", "artifacts_dir", "step_summary_path"]:
        if path_field in config_data and config_data[path_field]:
            path = Path(config_data[path_field])
            if not path.is_absolute():
                config_data[path_field] = config_dir / path

    return GraderConfig(**config_data)
