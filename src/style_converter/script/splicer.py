from __future__ import annotations

import re
from typing import Sequence

from .scanner import find_block_end
from .sections import ExtractedSection, Placement

CONTAINER_MARKER = "// === CUSTOM FUNCTIONS PRESERVED FROM v2.9 ==="
APPEND_MARKER = "// === CUSTOM CODE PRESERVED FROM v2.9 ==="

# `params` is the last standard member of the myTheme object in every template.
ANCHOR_RE = re.compile(r"params\s*:\s*function\s*\([^)]*\)\s*\{")
TRAILER_RE = re.compile(r"[ \t]*(,?)[ \t]*\n?")
MEMBER_INDENT = "    "


class TemplateAnchorError(ValueError):
    """Raised when a template has no ``params`` member to splice after."""


def _with_trailing_comma(code: str) -> str:
    return code if code.rstrip().endswith(",") else code + ","


def _insert_into_container(template: str, sections: Sequence[ExtractedSection]) -> str:
    match = ANCHOR_RE.search(template)
    end = find_block_end(template, match.end() - 1) if match else None
    if end is None:
        raise TemplateAnchorError("Template script has no params() member to insert custom functions after")

    trailer = TRAILER_RE.match(template, end)
    head = template[:end] + ("" if trailer.group(1) else ",") + template[end : trailer.end()]
    if not head.endswith("\n"):
        head += "\n"
    tail = template[trailer.end() :]

    body = f"\n\n{MEMBER_INDENT}".join(_with_trailing_comma(section.code) for section in sections)
    block = f"\n{MEMBER_INDENT}{CONTAINER_MARKER}\n{MEMBER_INDENT}{body}\n"
    return head + block + tail


def _append_after(template: str, sections: Sequence[ExtractedSection]) -> str:
    result = template if template.endswith("\n") else template + "\n"
    body = "\n\n".join(section.code for section in sections)
    return f"{result}\n{APPEND_MARKER}\n{body}\n"


def splice(template: str, sections: Sequence[ExtractedSection]) -> str:
    """Return *template* with *sections* inserted at their placement targets.

    Container sections follow the template's ``params`` member, each ending
    in a comma; appended sections go at the end of the file. Each non-empty
    group is preceded by a single provenance marker line. With no sections
    the template is returned as is.
    """

    container = [s for s in sections if s.placement is Placement.CONTAINER_INSERT]
    appended = [s for s in sections if s.placement is Placement.APPEND_AFTER]

    result = template
    if container:
        result = _insert_into_container(result, container)
    if appended:
        result = _append_after(result, appended)
    return result


__all__ = [
    "APPEND_MARKER",
    "CONTAINER_MARKER",
    "TemplateAnchorError",
    "splice",
]
