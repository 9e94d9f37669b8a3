from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

from ..package import StylePackage

ROOT_FILES = frozenset({"config.xml", "style.css", "style.js", "screenshot.png", "readme.md"})
CARRIED_ROOT_FILES = ("screenshot.png",)
FONT_EXTENSIONS = frozenset({".woff", ".woff2", ".ttf", ".eot", ".otf"})
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".svg", ".webp"})
DEFAULT_ICON_THRESHOLD_BYTES = 50 * 1024


class AssetCategory(str, Enum):
    ICONS = "icons"
    IMG = "img"
    FONTS = "fonts"


@dataclass(frozen=True, slots=True)
class AssetMove:
    source: str
    destination: str
    category: AssetCategory
    size: int

    @property
    def filename(self) -> str:
        return PurePosixPath(self.destination).name


def categorize(
    filename: str,
    size: int | None = None,
    threshold_bytes: int = DEFAULT_ICON_THRESHOLD_BYTES,
) -> AssetCategory | None:
    """Return the v3.0 subdirectory for *filename*, or ``None`` when it is not an asset.

    An SVG counts as an icon only when its *size* is known and below the
    threshold; the size cut-off is a rough stand-in for "decorative".
    """

    lowered = filename.lower()
    if lowered in ROOT_FILES:
        return None
    extension = PurePosixPath(lowered).suffix
    if "icon" in lowered or extension == ".gif":
        return AssetCategory.ICONS
    if extension == ".svg" and size is not None and size < threshold_bytes:
        return AssetCategory.ICONS
    if extension in FONT_EXTENSIONS:
        return AssetCategory.FONTS
    if extension in IMAGE_EXTENSIONS:
        return AssetCategory.IMG
    return None


def plan_assets(
    package: StylePackage, threshold_bytes: int = DEFAULT_ICON_THRESHOLD_BYTES
) -> list[AssetMove]:
    moves: dict[str, AssetMove] = {}
    for path in sorted(package.files):
        item = package.files[path]
        category = categorize(item.name, item.size, threshold_bytes)
        if category is None:
            continue
        destination = f"{category.value}/{item.name}"
        # Root files win over same-named files found deeper in the package.
        if destination in moves and not item.is_root:
            continue
        moves[destination] = AssetMove(
            source=path, destination=destination, category=category, size=item.size
        )
    return sorted(moves.values(), key=lambda move: move.destination)


def asset_locations(moves: list[AssetMove]) -> dict[str, str]:
    """Map bare filenames to their relocated path, for rewriting stylesheet urls."""

    return {move.filename: move.destination for move in moves}


def summarize(moves: list[AssetMove]) -> dict[str, int]:
    summary: dict[str, int] = {}
    for move in moves:
        summary[move.category.value] = summary.get(move.category.value, 0) + 1
    return summary


__all__ = [
    "AssetCategory",
    "AssetMove",
    "CARRIED_ROOT_FILES",
    "asset_locations",
    "categorize",
    "plan_assets",
    "summarize",
]
