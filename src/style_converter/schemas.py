from __future__ import annotations

from pydantic import BaseModel, Field

from .script.transformer import ScriptConversion


class HealthStatus(BaseModel):
    status: str
    version: str
    templates: list[str] = Field(default_factory=list)


class ScriptAnalysisResponse(BaseModel):
    style: str
    tier: str
    template: str
    line_count: int
    code_line_count: int
    features: list[str]
    custom_functions: list[str]
    preserved_sections: list[str]
    skipped_sections: list[str]
    merged_sections: list[str]

    @classmethod
    def from_conversion(cls, style: str, conversion: ScriptConversion) -> "ScriptAnalysisResponse":
        analysis = conversion.analysis
        return cls(
            style=style,
            tier=analysis.tier.value,
            template=analysis.template_name,
            line_count=analysis.document.line_count,
            code_line_count=analysis.code_line_count,
            features=analysis.flags.labels,
            custom_functions=list(analysis.flags.custom_functions),
            preserved_sections=conversion.integrated,
            skipped_sections=conversion.skipped,
            merged_sections=conversion.merged,
        )


__all__ = ["HealthStatus", "ScriptAnalysisResponse"]
