"""Checks a converted v3.0 file set before it is written or packaged."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal, Mapping

from .rewriters.assets import AssetCategory
from .rewriters.metadata import DEPRECATED_FIELDS, TARGET_COMPATIBILITY, MetadataParseError, parse_fields
from .rewriters.stylesheet import LEGACY_SELECTORS

Severity = Literal["error", "warning", "info"]

REQUIRED_FILES = ("config.xml", "style.js", "style.css")
REQUIRED_CONFIG_FIELDS = ("name", "compatibility", "version")
EXPECTED_MEMBERS = ("init", "inIframe", "searchForm", "isLowRes", "checkNav", "param", "params")
ASSET_DIRS = tuple(category.value for category in AssetCategory)
BARE_ASSET_URL_RE = re.compile(
    r"""url\s*\(\s*['"]?([^'")\s/]+\.(?:gif|png|jpg|jpeg|woff|woff2|ttf))['"]?\s*\)""",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    kind: str
    message: str
    severity: Severity
    detail: str | None = None


@dataclass(slots=True)
class ValidationReport:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    info: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, kind: str, message: str, severity: Severity, detail: str | None = None) -> None:
        issue = ValidationIssue(kind=kind, message=message, severity=severity, detail=detail)
        {"error": self.errors, "warning": self.warnings, "info": self.info}[severity].append(issue)


def _text(files: Mapping[str, bytes], name: str) -> str | None:
    data = files.get(name)
    if data is None:
        return None
    return data.decode("utf-8", errors="replace")


def _check_structure(files: Mapping[str, bytes], report: ValidationReport) -> None:
    for name in REQUIRED_FILES:
        if name in files:
            report.add("file-exists", f"Required file {name} exists", "info")
        else:
            report.add("missing-file", f"Required file {name} is missing", "error")
    for directory in ASSET_DIRS:
        if not any(path.startswith(directory + "/") for path in files):
            report.add(
                "missing-directory",
                f"Expected directory {directory}/ is missing (may be empty)",
                "warning",
            )


def _check_config(files: Mapping[str, bytes], report: ValidationReport) -> None:
    data = files.get("config.xml")
    if data is None:
        return
    try:
        fields = parse_fields(data)
    except MetadataParseError as exc:
        report.add("config-invalid-xml", f"config.xml is not valid XML: {exc}", "error")
        return
    for key in REQUIRED_CONFIG_FIELDS:
        if not fields.get(key):
            report.add("config-field-missing", f"config.xml is missing required field: {key}", "error")
    compatibility = fields.get("compatibility")
    if compatibility and compatibility != TARGET_COMPATIBILITY:
        report.add(
            "config-compatibility",
            f"config.xml compatibility should be {TARGET_COMPATIBILITY}, found: {compatibility}",
            "error",
        )
    for key in DEPRECATED_FIELDS:
        if key in fields:
            report.add("config-deprecated-field", f"config.xml contains deprecated field: {key}", "warning")
    report.add("config-valid", "config.xml is valid XML", "info")


def _check_script(files: Mapping[str, bytes], report: ValidationReport) -> None:
    content = _text(files, "style.js")
    if content is None:
        return
    if "var myTheme" not in content:
        report.add("js-missing-mytheme", "style.js is missing myTheme object", "error")
    for member in EXPECTED_MEMBERS:
        if not re.search(rf"\b{member}\s*:", content):
            report.add("js-missing-function", f"style.js is missing expected function: {member}", "warning")
    if "$.fn.isInViewport" not in content:
        report.add("js-missing-extension", "style.js is missing $.fn.isInViewport extension", "warning")
    if "myTheme.init()" not in content:
        report.add("js-missing-init", "style.js does not call myTheme.init()", "error")
    balance = content.count("{") - content.count("}")
    if balance:
        report.add(
            "js-syntax-warning",
            f"style.js may have mismatched braces (difference: {balance}). "
            "This may be inherited from the original v2.9 code.",
            "warning",
        )
    report.add("js-valid", "style.js passed basic validation", "info")


def _check_stylesheet(files: Mapping[str, bytes], report: ValidationReport) -> None:
    content = _text(files, "style.css")
    if content is None:
        return
    if not content.strip():
        report.add("css-empty", "style.css is empty", "warning")
    for selector in LEGACY_SELECTORS:
        if re.search(re.escape(selector) + r"(?![\w-])", content):
            report.add("css-old-selector", f"style.css contains old v2.9 selector: {selector}", "warning")
    bare = [match.group(0) for match in BARE_ASSET_URL_RE.finditer(content)]
    if bare:
        report.add(
            "css-asset-paths",
            f"style.css may have asset paths without subdirectories (found {len(bare)} instances)",
            "warning",
            detail=f"Consider reviewing: {', '.join(bare[:3])}",
        )
    report.add("css-valid", "style.css passed basic validation", "info")


def _check_assets(files: Mapping[str, bytes], report: ValidationReport) -> None:
    total = 0
    for directory in ASSET_DIRS:
        count = sum(1 for path in files if path.startswith(directory + "/"))
        total += count
        if count:
            report.add("assets-found", f"Found {count} files in {directory}/", "info")
    if total == 0:
        report.add("no-assets", "No assets found in icons/, img/, or fonts/ directories", "warning")


def validate(files: Mapping[str, bytes]) -> ValidationReport:
    report = ValidationReport()
    _check_structure(files, report)
    _check_config(files, report)
    _check_script(files, report)
    _check_stylesheet(files, report)
    _check_assets(files, report)
    return report


__all__ = ["ValidationIssue", "ValidationReport", "validate"]
