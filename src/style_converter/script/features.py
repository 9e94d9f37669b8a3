from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import cached_property


class Feature(str, Enum):
    """Custom behaviours a legacy style script may carry, in detection order."""

    IFRAME_RESIZE = "iframe_resize"
    CHARACTER_MANAGER = "character_manager"
    PHASE_DECORATOR = "phase_decorator"
    PRINT_HELPER = "print_helper"
    SHARED_INIT = "shared_init"

    @property
    def label(self) -> str:
        return FEATURE_LABELS[self]


FEATURE_LABELS: dict[Feature, str] = {
    Feature.IFRAME_RESIZE: "H5P iframe resizer",
    Feature.CHARACTER_MANAGER: "Character management",
    Feature.PHASE_DECORATOR: "Phase management",
    Feature.PRINT_HELPER: "printContent()",
    Feature.SHARED_INIT: "common.init()",
}

SHARED_INIT_RE = re.compile(r"common\s*:\s*\{")
TOP_LEVEL_FUNCTION_RE = re.compile(r"^function\s+(\w+)", re.MULTILINE)

# Top-level declarations that belong to a recognized feature.
FEATURE_FUNCTION_NAMES = frozenset({"printContent"})


@dataclass(frozen=True)
class SourceDocument:
    text: str

    @cached_property
    def line_count(self) -> int:
        return len(self.text.splitlines())

    @cached_property
    def code_line_count(self) -> int:
        """Lines that are neither blank nor ``//`` comments."""

        count = 0
        for line in self.text.splitlines():
            stripped = line.strip()
            if stripped and not stripped.startswith("//"):
                count += 1
        return count


@dataclass(frozen=True, slots=True)
class FeatureFlags:
    iframe_resize: bool = False
    character_manager: bool = False
    phase_decorator: bool = False
    print_helper: bool = False
    shared_init: bool = False
    custom_functions: tuple[str, ...] = ()

    def has(self, feature: Feature) -> bool:
        return bool(getattr(self, feature.value))

    @property
    def features(self) -> tuple[Feature, ...]:
        return tuple(feature for feature in Feature if self.has(feature))

    @property
    def labels(self) -> list[str]:
        return [feature.label for feature in self.features]

    def has_any(self) -> bool:
        return bool(self.features)


def _detect_iframe_resize(text: str) -> bool:
    return "h5pResizerInitialized" in text or "H5P iframe Resizer" in text


def _detect_character_manager(text: str) -> bool:
    return "$exeDevice.characters" in text or ".udl-character" in text


def _detect_phase_decorator(text: str) -> bool:
    return any(token in text for token in ("nodeSubSection", "nodeSection", "nodeDecoration"))


def _detect_print_helper(text: str) -> bool:
    return "printContent" in text and "function" in text


def _detect_shared_init(text: str) -> bool:
    return "common" in text and "init" in text and SHARED_INIT_RE.search(text) is not None


def find_custom_functions(text: str) -> tuple[str, ...]:
    names: list[str] = []
    for match in TOP_LEVEL_FUNCTION_RE.finditer(text):
        name = match.group(1)
        if name in FEATURE_FUNCTION_NAMES or name in names:
            continue
        names.append(name)
    return tuple(names)


def classify(text: str) -> FeatureFlags:
    return FeatureFlags(
        iframe_resize=_detect_iframe_resize(text),
        character_manager=_detect_character_manager(text),
        phase_decorator=_detect_phase_decorator(text),
        print_helper=_detect_print_helper(text),
        shared_init=_detect_shared_init(text),
        custom_functions=find_custom_functions(text),
    )


__all__ = [
    "FEATURE_LABELS",
    "Feature",
    "FeatureFlags",
    "SourceDocument",
    "classify",
    "find_custom_functions",
]
