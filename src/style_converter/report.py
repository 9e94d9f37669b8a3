"""Markdown conversion report written next to each converted style."""

from __future__ import annotations

import time

from .models import ConvertedStyle
from .rewriters.assets import summarize
from .rewriters.base import summarize_changes

MAX_CSS_ROWS = 20
RECOMMENDATIONS = (
    "**CSS Styling**: Review the merged CSS to ensure all styles are correct",
    "**Asset References**: Verify all asset paths are correctly updated",
    "**Custom Features**: Test all preserved custom functionality",
    "**Browser Testing**: Test the converted style in different browsers",
)


def _status(style: ConvertedStyle) -> str:
    return "PASSED" if style.validation.is_valid else "FAILED"


def _summary_lines(style: ConvertedStyle) -> list[str]:
    analysis = style.script.analysis
    return [
        "## Summary",
        "",
        f"- **Complexity Level:** {analysis.tier.value}",
        f"- **Template Used:** {analysis.template_name}",
        f"- **Original JS Lines:** {analysis.code_line_count}",
        f"- **Validation:** {_status(style)}",
        "",
    ]


def _script_lines(style: ConvertedStyle) -> list[str]:
    lines: list[str] = []
    labels = style.script.analysis.flags.labels
    if labels:
        lines += ["## Custom Features Detected", ""]
        lines += [f"- {label}" for label in labels]
        lines.append("")
    if style.script.integrated:
        lines += ["## JavaScript Transformation", "", "The following custom code sections were preserved:", ""]
        lines += [f"- {name}" for name in style.script.integrated]
        lines.append("")
    if style.script.skipped:
        lines += ["### Not Preserved", "", "Detected but could not be extracted; port these by hand:", ""]
        lines += [f"- {name}" for name in style.script.skipped]
        lines.append("")
    if style.script.merged:
        lines += ["### Carried Inside Another Section", ""]
        lines += [f"- {name}" for name in style.script.merged]
        lines.append("")
    functions = style.script.analysis.flags.custom_functions
    if functions:
        lines += ["### Other Top-Level Functions", ""]
        lines += [f"- `{name}`" for name in functions]
        lines.append("")
    return lines


def _css_lines(style: ConvertedStyle) -> list[str]:
    changes = style.css_changes
    lines = ["## CSS Changes", "", f"Total changes: {len(changes)}", ""]
    if not changes:
        return lines
    lines += [f"- {kind}: {count}" for kind, count in summarize_changes(changes).items()]
    lines.append("")
    lines += ["| Type | Old | New | Count |", "|------|-----|-----|-------|"]
    for change in changes[:MAX_CSS_ROWS]:
        lines.append(f"| {change.kind} | `{change.old or '-'}` | `{change.new or '-'}` | {change.count} |")
    if len(changes) > MAX_CSS_ROWS:
        lines += ["", f"*... and {len(changes) - MAX_CSS_ROWS} more changes*"]
    lines.append("")
    return lines


def _config_lines(style: ConvertedStyle) -> list[str]:
    if not style.config_changes:
        return []
    lines = ["## Config.xml Updates", ""]
    for change in style.config_changes:
        entry = f"- **{change.kind}**: {change.target}"
        if change.old and change.new:
            entry += f" ({change.old} -> {change.new})"
        elif change.new:
            entry += f" = {change.new}"
        lines += [entry, f"  - {change.description}"]
    lines.append("")
    return lines


def _asset_lines(style: ConvertedStyle) -> list[str]:
    lines = ["## Asset Migration", "", f"Total assets migrated: {len(style.assets)}", ""]
    for category, count in sorted(summarize(style.assets).items()):
        lines.append(f"- **{category}**: {count} files")
    if style.assets:
        lines.append("")
    return lines


def _validation_lines(style: ConvertedStyle) -> list[str]:
    validation = style.validation
    lines = [
        "## Validation Results",
        "",
        f"**Status:** {_status(style)}",
        "",
        f"- Errors: {len(validation.errors)}",
        f"- Warnings: {len(validation.warnings)}",
        "",
    ]
    if validation.errors:
        lines += ["### Errors", ""]
        lines += [f"- **{issue.kind}**: {issue.message}" for issue in validation.errors]
        lines.append("")
    if validation.warnings:
        lines += ["### Warnings", ""]
        lines += [f"- **{issue.kind}**: {issue.message}" for issue in validation.warnings]
        lines.append("")
    return lines


def render_report(style: ConvertedStyle, timestamp: float | None = None) -> str:
    stamp = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(timestamp if timestamp is not None else time.time()))
    lines = [
        "# eXeLearning Style Conversion Report",
        "",
        f"**Date:** {stamp}",
        "",
        f"**Style:** {style.name}",
        "",
        "---",
        "",
    ]
    lines += _summary_lines(style)
    lines += _script_lines(style)
    lines += _css_lines(style)
    lines += _config_lines(style)
    lines += _asset_lines(style)
    lines += _validation_lines(style)
    lines += ["## Recommendations", "", "### Manual Review Required", ""]
    lines += [f"{index}. {item}" for index, item in enumerate(RECOMMENDATIONS, start=1)]
    return "\n".join(lines) + "\n"


__all__ = ["render_report"]
