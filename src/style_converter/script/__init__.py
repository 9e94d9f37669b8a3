"""Legacy style script analysis, custom-code extraction and template splicing."""

from .complexity import ComplexityTier, TemplateSelection, select
from .features import Feature, FeatureFlags, SourceDocument, classify
from .scanner import BlockSpan, extract_balanced_block
from .sections import ExtractedSection, ExtractionReport, Placement, extract, extract_report
from .splicer import APPEND_MARKER, CONTAINER_MARKER, TemplateAnchorError, splice
from .transformer import ScriptAnalysis, ScriptConversion, analyze_script, transform_script

__all__ = [
    "APPEND_MARKER",
    "BlockSpan",
    "CONTAINER_MARKER",
    "ComplexityTier",
    "ExtractedSection",
    "ExtractionReport",
    "Feature",
    "FeatureFlags",
    "Placement",
    "ScriptAnalysis",
    "ScriptConversion",
    "SourceDocument",
    "TemplateAnchorError",
    "TemplateSelection",
    "analyze_script",
    "classify",
    "extract",
    "extract_balanced_block",
    "extract_report",
    "select",
    "splice",
    "transform_script",
]
