"""Domain models for style conversion services."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .logging import BatchSummary
from .rewriters.assets import AssetMove
from .rewriters.base import Change
from .script.transformer import ScriptConversion
from .validator import ValidationReport


@dataclass(slots=True)
class ConversionOptions:
    """Configuration for a single conversion run."""

    dry_run: bool = False
    create_zip: bool | None = None


@dataclass(slots=True)
class ConvertedStyle:
    """The converted v3.0 file set, held in memory until it is written."""

    name: str
    files: dict[str, bytes]
    script: ScriptConversion
    css_changes: list[Change]
    config_changes: list[Change]
    assets: list[AssetMove]
    validation: ValidationReport
    warnings: list[str] = field(default_factory=list)
    report: str = ""

    @property
    def zip_name(self) -> str:
        return f"{self.name}-3.0.zip"


@dataclass(slots=True)
class ConversionResult:
    """Result metadata for an individual conversion."""

    run_id: str
    style: ConvertedStyle
    summary: str
    output_dir: Path | None = None
    report_path: Path | None = None
    zip_path: Path | None = None

    @property
    def style_name(self) -> str:
        return self.style.name

    @property
    def warnings(self) -> list[str]:
        return self.style.warnings


@dataclass(slots=True)
class BatchConversionResult:
    """Aggregate results for a batch conversion request."""

    runs: list[ConversionResult]
    summary: BatchSummary


__all__ = [
    "BatchConversionResult",
    "ConversionOptions",
    "ConversionResult",
    "ConvertedStyle",
]
