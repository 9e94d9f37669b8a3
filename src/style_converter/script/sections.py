"""Pull custom code out of a legacy style script.

Print helper and shared-init blocks are brace matched. The character manager,
iframe resizer and phase decorator are located with bounded regexes instead;
their code shape is stable across published styles, but a regex is an
approximation and can stop early on unusual nesting.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

from .features import SHARED_INIT_RE, Feature, FeatureFlags
from .scanner import BlockSpan, extract_balanced_block


class Placement(str, Enum):
    CONTAINER_INSERT = "container_insert"
    APPEND_AFTER = "append_after"


@dataclass(frozen=True, slots=True)
class ExtractedSection:
    feature: Feature
    code: str
    placement: Placement

    @property
    def name(self) -> str:
        return self.feature.label


@dataclass(frozen=True, slots=True)
class ExtractionReport:
    sections: tuple[ExtractedSection, ...] = ()
    skipped: tuple[Feature, ...] = ()
    # feature -> feature whose section already carries its code
    merged: dict[Feature, Feature] = field(default_factory=dict)

    @property
    def section_names(self) -> list[str]:
        return [section.name for section in self.sections]


PRINT_HELPER_RE = re.compile(r"printContent\s*:\s*function\s*\([^)]*\)\s*\{")
CHARACTER_LISTENER_RE = re.compile(
    r"document\.addEventListener\s*\(\s*[\"']DOMContentLoaded[\"']\s*,\s*"
    r"(?:\(\s*\w*\s*\)\s*=>|function\s*\(\s*\w*\s*\))\s*\{"
    r"[\s\S]*?\.udl-character[\s\S]*?\}\);"
)
CHARACTER_DEVICE_RE = re.compile(
    r"if\s*\(\s*typeof\s+\$exeDevice\s*!==?\s*[\"']undefined[\"']\s*\)\s*\{"
    r"[\s\S]*?\$exeDevice\.characters[\s\S]*?\}"
)
IFRAME_RESIZE_RE = re.compile(
    r"//\s*H5P iframe Resizer[\s\S]*?\(function\s*\(\)\s*\{[\s\S]*?\}\)\(\);"
)
PHASE_DECORATOR_RE = re.compile(
    r"//\s*Phase management[\s\S]*?"
    r"\$\(\s*[\"']#nodeDecoration[\"']\s*\)\.addClass[\s\S]*?\}"
)


def _keyed_block(text: str, key_re: re.Pattern[str]) -> BlockSpan | None:
    match = key_re.search(text)
    if match is None:
        return None
    block = extract_balanced_block(text, match.end() - 1)
    if block is None:
        return None
    return BlockSpan(start=match.start(), end=block.end, code=text[match.start() : block.end])


def _regex_block(text: str, pattern: re.Pattern[str]) -> BlockSpan | None:
    match = pattern.search(text)
    if match is None:
        return None
    return BlockSpan(start=match.start(), end=match.end(), code=match.group(0))


def _joined(parts: Sequence[BlockSpan]) -> BlockSpan | None:
    if not parts:
        return None
    return BlockSpan(
        start=min(part.start for part in parts),
        end=max(part.end for part in parts),
        code="\n\n".join(part.code for part in parts),
    )


def _single(locate: Callable[[str], BlockSpan | None]) -> Callable[[str], tuple[BlockSpan, ...]]:
    def parts(text: str) -> tuple[BlockSpan, ...]:
        block = locate(text)
        return () if block is None else (block,)

    return parts


def extract_print_helper(text: str) -> BlockSpan | None:
    return _keyed_block(text, PRINT_HELPER_RE)


def extract_shared_init(text: str) -> BlockSpan | None:
    return _keyed_block(text, SHARED_INIT_RE)


def character_manager_parts(text: str) -> tuple[BlockSpan, ...]:
    """Listener and ``$exeDevice`` blocks, in source order.

    The two parts need not be adjacent; text between them belongs to neither.
    """

    found = (_regex_block(text, CHARACTER_LISTENER_RE), _regex_block(text, CHARACTER_DEVICE_RE))
    return tuple(sorted((block for block in found if block is not None), key=lambda block: block.start))


def extract_character_manager(text: str) -> BlockSpan | None:
    return _joined(character_manager_parts(text))


def extract_iframe_resize(text: str) -> BlockSpan | None:
    return _regex_block(text, IFRAME_RESIZE_RE)


def extract_phase_decorator(text: str) -> BlockSpan | None:
    return _regex_block(text, PHASE_DECORATOR_RE)


PartsExtractor = Callable[[str], tuple[BlockSpan, ...]]

EXTRACTION_ORDER: tuple[tuple[Feature, PartsExtractor, Placement], ...] = (
    (Feature.PRINT_HELPER, _single(extract_print_helper), Placement.CONTAINER_INSERT),
    (Feature.SHARED_INIT, _single(extract_shared_init), Placement.CONTAINER_INSERT),
    (Feature.CHARACTER_MANAGER, character_manager_parts, Placement.APPEND_AFTER),
    (Feature.IFRAME_RESIZE, _single(extract_iframe_resize), Placement.APPEND_AFTER),
    (Feature.PHASE_DECORATOR, _single(extract_phase_decorator), Placement.CONTAINER_INSERT),
)


def _encloses(outer: BlockSpan, inner: BlockSpan) -> bool:
    return outer.start <= inner.start and inner.end <= outer.end


def _containing(parts: Sequence[BlockSpan], taken: dict[Feature, tuple[BlockSpan, ...]]) -> Feature | None:
    # every part must sit inside a block that was actually emitted
    for feature, owned in taken.items():
        if all(any(_encloses(block, part) for block in owned) for part in parts):
            return feature
    return None


def extract_report(text: str, flags: FeatureFlags) -> ExtractionReport:
    sections: list[ExtractedSection] = []
    skipped: list[Feature] = []
    merged: dict[Feature, Feature] = {}
    taken: dict[Feature, tuple[BlockSpan, ...]] = {}

    for feature, extractor, placement in EXTRACTION_ORDER:
        if not flags.has(feature):
            continue
        parts = extractor(text)
        if not parts:
            skipped.append(feature)
            continue
        owner = _containing(parts, taken)
        if owner is not None:
            merged[feature] = owner
            continue
        taken[feature] = parts
        code = "\n\n".join(part.code for part in parts)
        sections.append(ExtractedSection(feature=feature, code=code, placement=placement))

    return ExtractionReport(sections=tuple(sections), skipped=tuple(skipped), merged=merged)


def extract(text: str, flags: FeatureFlags) -> list[ExtractedSection]:
    return list(extract_report(text, flags).sections)


__all__ = [
    "EXTRACTION_ORDER",
    "ExtractedSection",
    "ExtractionReport",
    "Placement",
    "character_manager_parts",
    "extract",
    "extract_character_manager",
    "extract_iframe_resize",
    "extract_phase_decorator",
    "extract_print_helper",
    "extract_report",
    "extract_shared_init",
]
