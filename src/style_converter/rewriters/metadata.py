from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape

from .base import Change, RewriteResponse

FIELDS = (
    "name",
    "title",
    "version",
    "compatibility",
    "author",
    "author-url",
    "license",
    "license-url",
    "description",
    "downloadable",
)
OPTIONAL_FIELDS = frozenset({"author-url"})
DEPRECATED_FIELDS = ("extra-head", "extra-body", "edition-extra-head")
TEMPLATE_DEFAULT_FIELDS = ("license", "license-url", "description")
TARGET_VERSION = "2025"
TARGET_COMPATIBILITY = "3.0"
DEFAULT_AUTHOR = "Unknown"
FALLBACK_DEFAULTS = {
    "license": "Creative Commons by-sa",
    "license-url": "http://creativecommons.org/licenses/by-sa/3.0/",
    "description": "Converted from v2.9 to v3.0",
}
XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}
FIELD_RE = re.compile(r"<([\w-]+)>(.*?)</\1>", re.DOTALL)


class MetadataParseError(ValueError):
    """Raised when config.xml is not well-formed."""


def parse_fields(source: bytes | str) -> dict[str, str]:
    """Return the ``<theme>`` child fields of a config.xml document."""

    data = source.encode("utf-8") if isinstance(source, str) else source
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise MetadataParseError(str(exc)) from exc
    theme = root if root.tag == "theme" else root.find("theme")
    if theme is None:
        return {}
    return {child.tag: (child.text or "").strip() for child in theme}


def scan_fields(source: bytes | str) -> dict[str, str]:
    """Best-effort field lookup for documents the XML parser rejects."""

    text = source.decode("utf-8", errors="replace") if isinstance(source, bytes) else source
    fields: dict[str, str] = {}
    for match in FIELD_RE.finditer(text):
        fields.setdefault(match.group(1), match.group(2).strip())
    return fields


def render_config(metadata: dict[str, str]) -> str:
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', "<theme>"]
    for key in FIELDS:
        value = metadata.get(key, "")
        if key in OPTIONAL_FIELDS and not value:
            continue
        lines.append(f"    <{key}>{escape(value, XML_ENTITIES)}</{key}>")
    lines.append("</theme>")
    return "\n".join(lines) + "\n"


def _template_defaults(template_metadata: str) -> dict[str, str]:
    defaults = dict(FALLBACK_DEFAULTS)
    if not template_metadata:
        return defaults
    try:
        fields = parse_fields(template_metadata)
    except MetadataParseError:
        return defaults
    for key in TEMPLATE_DEFAULT_FIELDS:
        if fields.get(key):
            defaults[key] = fields[key]
    return defaults


def migrate_fields(
    old: dict[str, str], style_name: str, defaults: dict[str, str]
) -> tuple[dict[str, str], list[Change]]:
    changes: list[Change] = []
    metadata = {key: old[key] for key in FIELDS if old.get(key)}

    if not metadata.get("name"):
        metadata["name"] = style_name
        changes.append(Change("field-added", "name", new=style_name, description="Added name field from style name"))
    if not metadata.get("title"):
        metadata["title"] = metadata["name"]
        changes.append(
            Change("field-added", "title", new=metadata["name"], description="Added title field based on name")
        )

    for key, target, description in (
        ("version", TARGET_VERSION, "Updated version to v3.0 standard"),
        ("compatibility", TARGET_COMPATIBILITY, "Updated compatibility to 3.0"),
    ):
        previous = metadata.get(key)
        metadata[key] = target
        if previous is None:
            changes.append(Change("field-added", key, new=target, description=description))
        elif previous != target:
            changes.append(Change("field-updated", key, old=previous, new=target, description=description))

    if not metadata.get("downloadable"):
        metadata["downloadable"] = "1"
        changes.append(Change("field-added", "downloadable", new="1", description="Added downloadable field"))

    metadata.setdefault("author", DEFAULT_AUTHOR)
    for key in TEMPLATE_DEFAULT_FIELDS:
        metadata.setdefault(key, defaults[key])

    for key in DEPRECATED_FIELDS:
        if key in old:
            changes.append(
                Change(
                    "field-removed",
                    key,
                    old=old[key] or None,
                    description=f"Removed deprecated {key} field (JavaScript is now auto-loaded)",
                )
            )
    return metadata, changes


def rewrite_metadata(
    source: bytes | None, style_name: str, template_metadata: str = ""
) -> RewriteResponse:
    warnings: list[str] = []
    if source is None:
        old: dict[str, str] = {}
        warnings.append("CONFIG_XML_MISSING")
    else:
        try:
            old = parse_fields(source)
        except MetadataParseError:
            old = scan_fields(source)
            warnings.append("CONFIG_XML_INVALID")
    metadata, changes = migrate_fields(old, style_name, _template_defaults(template_metadata))
    return RewriteResponse(content=render_config(metadata), changes=changes, warnings=warnings)


__all__ = [
    "DEPRECATED_FIELDS",
    "FIELDS",
    "MetadataParseError",
    "TARGET_COMPATIBILITY",
    "TARGET_VERSION",
    "migrate_fields",
    "parse_fields",
    "render_config",
    "rewrite_metadata",
    "scan_fields",
]
