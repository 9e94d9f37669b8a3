"""Target-format (v3.0) template bundles.

Each bundle is a directory holding ``style.js``, ``style.css`` and
``config.xml``. The ``base`` and ``neo`` bundles ship with the package; a
configured directory may add bundles or override the shipped ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

SCRIPT_FILE = "style.js"
STYLE_FILE = "style.css"
METADATA_FILE = "config.xml"


@dataclass(frozen=True, slots=True)
class TemplateBundle:
    name: str
    script: str
    style: str
    metadata: str


class TemplateNotFoundError(LookupError):
    """Raised when no bundle exists for a template name."""


def _read_bundle(name: str, root: Traversable) -> TemplateBundle:
    return TemplateBundle(
        name=name,
        script=root.joinpath(SCRIPT_FILE).read_text(encoding="utf-8"),
        style=root.joinpath(STYLE_FILE).read_text(encoding="utf-8"),
        metadata=root.joinpath(METADATA_FILE).read_text(encoding="utf-8"),
    )


def _is_bundle(root: Traversable) -> bool:
    return root.is_dir() and all(
        root.joinpath(filename).is_file() for filename in (SCRIPT_FILE, STYLE_FILE, METADATA_FILE)
    )


def bundled_names() -> list[str]:
    package = resources.files(__name__)
    return sorted(entry.name for entry in package.iterdir() if _is_bundle(entry))


@lru_cache(maxsize=None)
def load_bundled(name: str) -> TemplateBundle:
    root = resources.files(__name__).joinpath(name)
    if not _is_bundle(root):
        raise TemplateNotFoundError(f"Template not found: {name}")
    return _read_bundle(name, root)


class TemplateLibrary:
    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory

    def names(self) -> list[str]:
        names = set(bundled_names())
        if self._directory is not None and self._directory.is_dir():
            names.update(entry.name for entry in self._directory.iterdir() if _is_bundle(entry))
        return sorted(names)

    def load(self, name: str) -> TemplateBundle:
        if self._directory is not None:
            candidate = self._directory / name
            if _is_bundle(candidate):
                return _read_bundle(name, candidate)
        return load_bundled(name)


__all__ = [
    "METADATA_FILE",
    "SCRIPT_FILE",
    "STYLE_FILE",
    "TemplateBundle",
    "TemplateLibrary",
    "TemplateNotFoundError",
    "bundled_names",
    "load_bundled",
]
