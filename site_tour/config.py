# === FILE: site_tour/config.py ===
"""
Loading and validation of the SiteTour crawl configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field


class CrawlConfig(BaseModel):
    """Configuration for one crawl session."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: str = Field(..., min_length=1, description="Resource the crawl starts from.")
    max_depth: int = Field(4, ge=0, description="Depth budget of the seed.")
    timeout: float = Field(10.0, gt=0, description="Per-request timeout (seconds).")
    user_agent: str = Field("SiteTourBot/1.0", min_length=1, description="User-Agent header.")
    retry_times: int = Field(2, ge=0, description="Retries on 5xx/429 and transport errors.")
    retry_backoff: float = Field(1.0, ge=0, description="Base of the exponential backoff (seconds).")
    same_host_only: bool = Field(True, description="Follow links to the seed's host only.")
    summary_length: int = Field(120, ge=1, description="Max length of a page summary.")
    crawl_timeout: Optional[float] = Field(None, gt=0, description="Bound on the whole crawl (seconds).")


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Read YAML or JSON and return a validated CrawlConfig.
    Raises FileNotFoundError when the file (or the default one) is missing.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlConfig(**data)


def with_overrides(config: CrawlConfig, **changes: Any) -> CrawlConfig:
    """Revalidated copy of *config*; ``None`` values leave a field untouched."""
    update = {k: v for k, v in changes.items() if v is not None}
    if not update:
        return config
    return CrawlConfig(**{**config.model_dump(), **update})
