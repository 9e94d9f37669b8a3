from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Mapping, Sequence

from ..package import StyleFile
from .assets import AssetCategory, categorize
from .base import Change, RewriteResponse


@dataclass(frozen=True, slots=True)
class SelectorRename:
    kind: str
    old: str
    new: str
    description: str

    @property
    def pattern(self) -> re.Pattern[str]:
        return re.compile(re.escape(self.old) + r"(?![\w-])")


SELECTOR_RENAMES: tuple[SelectorRename, ...] = (
    SelectorRename("class", ".no-nav", ".siteNav-off", "Updated navigation toggle class"),
    SelectorRename("class", ".hide-nav", ".siteNav-off", "Updated navigation toggle class"),
    SelectorRename("class", ".show-nav", ".siteNav-on", "Updated navigation toggle class"),
    SelectorRename("id", "#toggle-nav", "#siteNavToggler", "Updated menu toggle button ID"),
    SelectorRename("id", "#nav-toggler", "#siteNavToggler", "Updated menu toggle button ID"),
    SelectorRename("id", "#header-options", "#siteNavToggler", "Updated menu toggle container ID"),
)
LEGACY_SELECTORS = tuple(rename.old for rename in SELECTOR_RENAMES)

URL_RE = re.compile(r"""url\(\s*(['"]?)([^'")\s]+)\1\s*\)""", re.IGNORECASE)
EXTERNAL_PREFIXES = ("http:", "https:", "//", "data:", "#")


def source_banner(filename: str) -> str:
    return (
        "/* ========================================\n"
        f"   Source: {filename}\n"
        "   ======================================== */\n\n"
    )


def merge_stylesheets(sheets: Sequence[StyleFile]) -> str:
    return "".join(source_banner(sheet.name) + sheet.text + "\n\n" for sheet in sheets)


def rename_selectors(css: str) -> tuple[str, list[Change]]:
    changes: list[Change] = []
    for rename in SELECTOR_RENAMES:
        css, count = rename.pattern.subn(rename.new, css)
        if count:
            changes.append(
                Change(
                    kind=rename.kind,
                    target=rename.old,
                    old=rename.old,
                    new=rename.new,
                    count=count,
                    description=rename.description,
                )
            )
    return css, changes


def _fallback_destination(filename: str) -> str | None:
    if PurePosixPath(filename.lower()).suffix == ".svg" and "icon" not in filename.lower():
        return None
    category = categorize(filename)
    if category is None:
        return None
    return f"{category.value}/{filename}"


def prefix_asset_urls(css: str, locations: Mapping[str, str]) -> tuple[str, list[Change]]:
    """Point bare ``url(file)`` references at the subdirectory the asset moves to.

    Files missing from *locations* fall back to extension rules. External,
    ``data:`` and already-pathed urls are left alone.
    """

    counts: dict[tuple[str, str], int] = {}
    categories: dict[str, AssetCategory | None] = {}

    def replace(match: re.Match[str]) -> str:
        quote, target = match.group(1), match.group(2)
        if target.lower().startswith(EXTERNAL_PREFIXES) or "/" in target:
            return match.group(0)
        filename = re.split(r"[?#]", target, maxsplit=1)[0]
        destination = locations.get(filename) or _fallback_destination(filename)
        if destination is None:
            return match.group(0)
        updated = destination + target[len(filename) :]
        counts[(target, updated)] = counts.get((target, updated), 0) + 1
        categories[updated] = categorize(filename)
        return f"url({quote}{updated}{quote})"

    css = URL_RE.sub(replace, css)
    changes = [
        Change(
            kind="asset-path",
            target=old,
            old=old,
            new=new,
            count=count,
            description=(
                "Updated font path to new directory structure"
                if categories.get(new) is AssetCategory.FONTS
                else "Updated asset path to new directory structure"
            ),
        )
        for (old, new), count in counts.items()
    ]
    return css, changes


def rewrite_stylesheets(
    sheets: Sequence[StyleFile],
    locations: Mapping[str, str],
    fallback: str = "",
) -> RewriteResponse:
    if not sheets:
        return RewriteResponse(content=fallback, warnings=["NO_STYLESHEETS"])
    css = merge_stylesheets(sheets)
    css, selector_changes = rename_selectors(css)
    css, asset_changes = prefix_asset_urls(css, locations)
    return RewriteResponse(content=css, changes=selector_changes + asset_changes)


__all__ = [
    "LEGACY_SELECTORS",
    "SELECTOR_RENAMES",
    "merge_stylesheets",
    "prefix_asset_urls",
    "rename_selectors",
    "rewrite_stylesheets",
]
