# === FILE: site_walker/config.py ===
"""
Loading and validation of the SiteWalker crawl configuration.
Pydantic describes the schema; YAML and JSON files are supported.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
    model_validator,
)

from site_walker.crawler.crawler import CrawlEngine
from site_walker.crawler.fetcher import DEFAULT_USER_AGENT

__all__ = (
    "CrawlConfig",
    "MIN_CRAWL_TIMEOUT",
    "DEFAULT_CONFIG_PATH",
    "read_config",
    "load_config",
    "describe_errors",
)

MIN_CRAWL_TIMEOUT = 5.0


class CrawlConfig(BaseModel):
    """Settings for one crawl-and-report run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    starting_url: HttpUrl = Field(..., description="Seed URL; its origin bounds the crawl.")
    output_path: Path = Field(Path("reports"), description="Directory for the report file.")
    result_file: str = Field("crawl-report.txt", min_length=1, description="Report file name.")
    num_workers: int = Field(4, description="Concurrent fetches; values below 1 become 1.")
    progress_interval: float = Field(
        1.0, description="Seconds between progress events; <= 0 disables them."
    )
    parse_timeout: float = Field(10.0, description="Per-page timeout in seconds; <= 0 means none.")
    crawl_timeout: float = Field(
        300.0, description=f"Whole-crawl timeout in seconds; at least {MIN_CRAWL_TIMEOUT:g}."
    )
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")

    @field_validator("starting_url", mode="before")
    def _strip_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("num_workers", mode="after")
    def _clamp_workers(cls, v: int) -> int:
        return max(CrawlEngine.MIN_WORKERS, v)

    @field_validator("crawl_timeout", mode="after")
    def _clamp_crawl_timeout(cls, v: float) -> float:
        return max(MIN_CRAWL_TIMEOUT, v)

    @field_validator("result_file", mode="after")
    def _plain_file_name(cls, v: str) -> str:
        if Path(v).name != v or v in (".", ".."):
            raise ValueError("result_file must be a file name, not a path")
        return v

    @model_validator(mode="after")
    def _check_output_path(self) -> CrawlConfig:
        if self.output_path.exists() and not self.output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {self.output_path}")
        return self

    @property
    def report_path(self) -> Path:
        return self.output_path / self.result_file


DEFAULT_CONFIG_PATH = Path("configs/crawler.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_config(path: Union[str, Path, None]) -> Dict[str, Any]:
    """
    Reads a YAML or JSON file into an unvalidated mapping.
    A missing file raises FileNotFoundError.
    """
    if path is None:
        path_obj = DEFAULT_CONFIG_PATH
    else:
        path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """Reads and validates a configuration file."""
    return CrawlConfig(**read_config(path))


def describe_errors(exc: ValidationError) -> List[str]:
    """Flattens a pydantic ValidationError into one message per problem."""
    messages: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages
