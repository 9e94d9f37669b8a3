from conftest import CHARACTER_LISTENER, IFRAME_RESIZER, PRINT_HELPER, SHARED_INIT

import pytest

from style_converter.script import (
    APPEND_MARKER,
    CONTAINER_MARKER,
    ComplexityTier,
    SourceDocument,
    TemplateAnchorError,
    analyze_script,
    transform_script,
)
from style_converter.templates import TemplateBundle, TemplateNotFoundError, load_bundled


def _pad_to(text: str, code_lines: int) -> str:
    missing = code_lines - SourceDocument(text).code_line_count
    return text + "\n".join(f"var pad{index} = {index};" for index in range(missing)) + "\n"


def test_simple_style_keeps_template(simple_script: str) -> None:
    conversion = transform_script(simple_script, load_bundled)
    assert conversion.analysis.tier is ComplexityTier.SIMPLE
    assert conversion.template.name == "base"
    assert conversion.integrated == []
    assert conversion.script == load_bundled("base").script


def test_complex_style_with_all_features(all_features_script: str) -> None:
    text = _pad_to(all_features_script, 317)
    assert SourceDocument(text).code_line_count == 317

    conversion = transform_script(text, load_bundled)
    analysis = conversion.analysis
    assert analysis.flags.has_any()
    assert len(analysis.flags.features) == 5
    assert analysis.tier is ComplexityTier.COMPLEX
    assert analysis.template_name == "neo"
    assert "movePageTitle" in conversion.script

    assert conversion.integrated == [
        "printContent()",
        "common.init()",
        "Character management",
        "H5P iframe resizer",
    ]
    assert conversion.merged == ["Phase management (inside common.init())"]

    script = conversion.script
    assert script.count(CONTAINER_MARKER) == 1
    assert script.count(APPEND_MARKER) == 1
    for code in (PRINT_HELPER, SHARED_INIT, CHARACTER_LISTENER, IFRAME_RESIZER):
        assert code in script

    params = script.index("params: function")
    container = script.index(CONTAINER_MARKER)
    viewport = script.index("$.fn.isInViewport")
    assert params < container < script.index(PRINT_HELPER) < script.index(SHARED_INIT) < viewport
    assert script.index("myTheme.init();\n});") < script.index(APPEND_MARKER)
    assert script.index(APPEND_MARKER) < script.index(CHARACTER_LISTENER) < script.index(IFRAME_RESIZER)


def test_malformed_print_helper_still_converts() -> None:
    text = "var myTheme = {\n    printPage: function() { myTheme.printContent(); }\n};\n\n" + IFRAME_RESIZER + "\n"
    conversion = transform_script(text, load_bundled)
    assert conversion.skipped == ["printContent()"]
    assert conversion.integrated == ["H5P iframe resizer"]
    assert CONTAINER_MARKER not in conversion.script
    assert IFRAME_RESIZER in conversion.script


def test_empty_script_is_simple() -> None:
    analysis = analyze_script("")
    assert analysis.tier is ComplexityTier.SIMPLE
    assert analysis.template_name == "base"
    assert analysis.code_line_count == 0


def test_missing_template_propagates() -> None:
    def load(name: str) -> TemplateBundle:
        raise TemplateNotFoundError(name)

    with pytest.raises(TemplateNotFoundError):
        transform_script("", load)


def test_template_without_params_anchor_fails_for_container_sections() -> None:
    broken = TemplateBundle(name="base", script="var myTheme = {};\n", style="", metadata="")
    text = "var myTheme = {\n    printContent: function() { print(); }\n};\n"
    with pytest.raises(TemplateAnchorError):
        transform_script(text, lambda name: broken)
