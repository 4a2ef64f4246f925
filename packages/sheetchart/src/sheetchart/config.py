"""Configuration model for the sheetchart pipeline.

Provides ``SheetChartConfig`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

from pydantic import BaseModel, Field


def _load_mapping(path: str) -> dict[str, Any]:
    """Read a YAML or JSON file into a dict, choosing the format by extension."""
    file_path = pathlib.Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = file_path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError(
                "pyyaml is required to load YAML config files. "
                "Install it with: pip install pyyaml"
            ) from exc
        with open(file_path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    elif suffix == ".json":
        with open(file_path, encoding="utf-8") as fh:
            data = json.load(fh)
    else:
        raise ValueError(
            f"Unsupported config file extension '{suffix}'. "
            "Use .yaml, .yml, or .json."
        )

    return data or {}


class SheetChartConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``SheetChartConfig.from_file(path)``.
    """

    # --- Delimited text ---
    text_encoding: str = "utf-8-sig"

    # --- Workbooks ---
    enable_pandas_fallback: bool = True
    skip_hidden_sheets: bool = False
    date_format: str = "%Y-%m-%d"

    # --- Column analysis ---
    preview_limit: int = Field(
        default=5,
        ge=0,
        description="Number of cells shown by ColumnAnalyzer.preview() by default.",
    )

    # --- Logging / PII safety ---
    log_sample_data: bool = False

    @classmethod
    def from_file(cls, path: str) -> SheetChartConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file extension is not recognized.
        """
        return cls(**_load_mapping(path))
