from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .features import FeatureFlags

BASE_TEMPLATE = "base"
PAGE_TITLE_TEMPLATE = "neo"
COMPLEX_LINE_THRESHOLD = 300
MODERATE_FUNCTION_THRESHOLD = 2


class ComplexityTier(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


@dataclass(frozen=True, slots=True)
class TemplateSelection:
    tier: ComplexityTier
    template_name: str


def select(flags: FeatureFlags, line_count: int) -> TemplateSelection:
    if (
        flags.iframe_resize
        or flags.character_manager
        or flags.phase_decorator
        or line_count > COMPLEX_LINE_THRESHOLD
    ):
        # The neo template carries movePageTitle, which these styles rely on.
        return TemplateSelection(ComplexityTier.COMPLEX, PAGE_TITLE_TEMPLATE)
    if (
        flags.print_helper
        or flags.shared_init
        or len(flags.custom_functions) > MODERATE_FUNCTION_THRESHOLD
    ):
        return TemplateSelection(ComplexityTier.MODERATE, BASE_TEMPLATE)
    return TemplateSelection(ComplexityTier.SIMPLE, BASE_TEMPLATE)


__all__ = [
    "BASE_TEMPLATE",
    "COMPLEX_LINE_THRESHOLD",
    "ComplexityTier",
    "PAGE_TITLE_TEMPLATE",
    "TemplateSelection",
    "select",
]
