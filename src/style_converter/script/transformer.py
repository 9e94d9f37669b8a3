from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..templates import TemplateBundle
from .complexity import ComplexityTier, TemplateSelection, select
from .features import FeatureFlags, SourceDocument, classify
from .sections import ExtractionReport, extract_report
from .splicer import splice

TemplateLoader = Callable[[str], TemplateBundle]


@dataclass(frozen=True, slots=True)
class ScriptAnalysis:
    document: SourceDocument
    flags: FeatureFlags
    selection: TemplateSelection

    @property
    def tier(self) -> ComplexityTier:
        return self.selection.tier

    @property
    def template_name(self) -> str:
        return self.selection.template_name

    @property
    def code_line_count(self) -> int:
        return self.document.code_line_count


@dataclass(frozen=True, slots=True)
class ScriptConversion:
    script: str
    analysis: ScriptAnalysis
    template: TemplateBundle
    extraction: ExtractionReport

    @property
    def integrated(self) -> list[str]:
        return self.extraction.section_names

    @property
    def skipped(self) -> list[str]:
        return [feature.label for feature in self.extraction.skipped]

    @property
    def merged(self) -> list[str]:
        return [
            f"{feature.label} (inside {owner.label})"
            for feature, owner in self.extraction.merged.items()
        ]


def analyze_script(text: str) -> ScriptAnalysis:
    document = SourceDocument(text)
    flags = classify(text)
    return ScriptAnalysis(
        document=document,
        flags=flags,
        selection=select(flags, document.code_line_count),
    )


def transform_script(text: str, load_template: TemplateLoader) -> ScriptConversion:
    """Rebuild a legacy style script on top of the selected v3.0 template.

    Raises ``TemplateNotFoundError`` when the selected template is missing and
    ``TemplateAnchorError`` when custom functions cannot be placed in it.
    """

    analysis = analyze_script(text)
    template = load_template(analysis.template_name)
    extraction = extract_report(text, analysis.flags)
    script = splice(template.script, extraction.sections)
    return ScriptConversion(script=script, analysis=analysis, template=template, extraction=extraction)


__all__ = [
    "ScriptAnalysis",
    "ScriptConversion",
    "TemplateLoader",
    "analyze_script",
    "transform_script",
]
