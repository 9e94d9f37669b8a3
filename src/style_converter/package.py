from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable, Mapping
from zipfile import ZIP_DEFLATED, ZipFile

IGNORED_PARTS = frozenset({"__MACOSX", ".DS_Store"})
LEGACY_SCRIPT_SUFFIX = "_js.js"
PAIRED_STYLESHEETS = ("content.css", "nav.css")


class PackageError(RuntimeError):
    """Raised when an input cannot be read as a style package."""


@dataclass(frozen=True, slots=True)
class StyleFile:
    path: str
    data: bytes

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_root(self) -> bool:
        return "/" not in self.path

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace").lstrip("\ufeff")


@dataclass(slots=True)
class StylePackage:
    name: str
    files: dict[str, StyleFile] = field(default_factory=dict)

    def get(self, path: str) -> StyleFile | None:
        return self.files.get(path)

    def root_files(self) -> list[StyleFile]:
        return [self.files[key] for key in sorted(self.files) if self.files[key].is_root]

    def find_script(self) -> StyleFile | None:
        scripts = [item for item in self.root_files() if item.name.lower().endswith(".js")]
        for candidate in scripts:
            if candidate.name.lower().endswith(LEGACY_SCRIPT_SUFFIX):
                return candidate
        for candidate in scripts:
            if candidate.name.lower() == "style.js":
                return candidate
        return scripts[0] if scripts else None

    def find_stylesheets(self) -> list[StyleFile]:
        sheets = {item.name: item for item in self.root_files() if item.name.lower().endswith(".css")}
        if all(name in sheets for name in PAIRED_STYLESHEETS):
            return [sheets[name] for name in PAIRED_STYLESHEETS]
        return [sheets[name] for name in sorted(sheets)]

    def find_metadata(self) -> StyleFile | None:
        for item in self.root_files():
            if item.name.lower() == "config.xml":
                return item
        return None


def _is_ignored(path: str) -> bool:
    return any(part in IGNORED_PARTS for part in PurePosixPath(path).parts)


def _strip_common_root(entries: Mapping[str, bytes]) -> dict[str, bytes]:
    tops = {PurePosixPath(path).parts[0] for path in entries}
    if len(tops) != 1 or any("/" not in path for path in entries):
        return dict(entries)
    prefix = next(iter(tops)) + "/"
    return {path[len(prefix) :]: data for path, data in entries.items()}


def _build_package(name: str, entries: Mapping[str, bytes]) -> StylePackage:
    files = {path: StyleFile(path=path, data=data) for path, data in entries.items()}
    return StylePackage(name=name, files=files)


def read_style_dir(path: Path) -> StylePackage:
    if not path.is_dir():
        raise PackageError(f"Style folder does not exist: {path}")
    entries: dict[str, bytes] = {}
    for file_path in sorted(path.rglob("*")):
        if not file_path.is_file():
            continue
        relative = file_path.relative_to(path).as_posix()
        if _is_ignored(relative):
            continue
        entries[relative] = file_path.read_bytes()
    return _build_package(path.name, entries)


def read_style_zip(source: Path | bytes, name: str | None = None) -> StylePackage:
    buffer = io.BytesIO(source) if isinstance(source, bytes) else source
    if name is None:
        name = source.stem if isinstance(source, Path) else "converted-style"
    try:
        with ZipFile(buffer) as archive:
            entries = {
                info.filename: archive.read(info)
                for info in archive.infolist()
                if not info.is_dir() and not _is_ignored(info.filename)
            }
    except zipfile.BadZipFile as exc:
        raise PackageError(f"Not a valid ZIP archive: {name}") from exc
    return _build_package(name, _strip_common_root(entries))


def load_style(path: Path) -> StylePackage:
    if path.is_dir():
        return read_style_dir(path)
    if not path.exists():
        raise PackageError(f"Input path does not exist: {path}")
    if not zipfile.is_zipfile(path):
        raise PackageError(f"Unsupported style input (expected a folder or .zip): {path.name}")
    return read_style_zip(path)


def build_zip(files: Iterable[tuple[str, bytes]]) -> bytes:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w", compression=ZIP_DEFLATED, compresslevel=9) as archive:
        for relative, data in files:
            if ".." in PurePosixPath(relative).parts:
                continue
            archive.writestr(relative, data)
    return buffer.getvalue()


__all__ = [
    "PackageError",
    "StyleFile",
    "StylePackage",
    "build_zip",
    "load_style",
    "read_style_dir",
    "read_style_zip",
]
