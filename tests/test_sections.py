from conftest import CHARACTER_DEVICE, CHARACTER_LISTENER, IFRAME_RESIZER, PRINT_HELPER, SHARED_INIT

from style_converter.script.features import Feature, FeatureFlags, classify
from style_converter.script.sections import (
    Placement,
    character_manager_parts,
    extract,
    extract_character_manager,
    extract_phase_decorator,
    extract_report,
)
from style_converter.script.splicer import splice
from style_converter.templates import load_bundled


def test_simple_script_extracts_nothing(simple_script: str) -> None:
    assert extract(simple_script, classify(simple_script)) == []


def test_sections_follow_priority_order(all_features_script: str) -> None:
    report = extract_report(all_features_script, classify(all_features_script))
    assert [section.feature for section in report.sections] == [
        Feature.PRINT_HELPER,
        Feature.SHARED_INIT,
        Feature.CHARACTER_MANAGER,
        Feature.IFRAME_RESIZE,
    ]
    assert [section.placement for section in report.sections] == [
        Placement.CONTAINER_INSERT,
        Placement.CONTAINER_INSERT,
        Placement.APPEND_AFTER,
        Placement.APPEND_AFTER,
    ]
    assert report.skipped == ()


def test_section_code_is_exact_source_span(all_features_script: str) -> None:
    sections = {section.feature: section.code for section in extract(all_features_script, classify(all_features_script))}
    assert sections[Feature.PRINT_HELPER] == PRINT_HELPER
    assert sections[Feature.SHARED_INIT] == SHARED_INIT
    assert sections[Feature.CHARACTER_MANAGER] == CHARACTER_LISTENER + "\n\n" + CHARACTER_DEVICE
    assert sections[Feature.IFRAME_RESIZE] == IFRAME_RESIZER


def test_phase_decorator_inside_shared_init_is_merged(all_features_script: str) -> None:
    report = extract_report(all_features_script, classify(all_features_script))
    assert report.merged == {Feature.PHASE_DECORATOR: Feature.SHARED_INIT}
    assert "Phase management" not in report.section_names
    assert sum(section.code.count("//Phase management") for section in report.sections) == 1


def test_standalone_phase_decorator_is_container_section() -> None:
    text = (
        "//Phase management\n"
        "if ($('#nodeDecoration').length) {\n"
        "    $('#nodeDecoration').addClass('phase');\n"
        "}\n"
    )
    report = extract_report(text, classify(text))
    assert report.section_names == ["Phase management"]
    assert report.sections[0].placement is Placement.CONTAINER_INSERT
    assert extract_phase_decorator(text) is not None


def test_missing_print_helper_declaration_is_skipped() -> None:
    text = (
        "var myTheme = {\n"
        "    printPage: function() { myTheme.printContent(); }\n"
        "};\n\n" + IFRAME_RESIZER + "\n"
    )
    flags = classify(text)
    assert flags.print_helper
    report = extract_report(text, flags)
    assert report.skipped == (Feature.PRINT_HELPER,)
    assert report.section_names == ["H5P iframe resizer"]


def test_unterminated_print_helper_is_skipped() -> None:
    text = "var myTheme = {\n    printContent: function(id) {\n        if (id) {\n"
    report = extract_report(text, classify(text))
    assert report.sections == ()
    assert report.skipped == (Feature.PRINT_HELPER,)


def test_unflagged_features_are_not_extracted() -> None:
    text = "var myTheme = {\n    printContent: function() { print(); }\n};\n"
    assert extract(text, FeatureFlags()) == []


def test_character_manager_accepts_arrow_listener() -> None:
    text = (
        'document.addEventListener("DOMContentLoaded", () => {\n'
        '    document.querySelector(".udl-character").focus();\n'
        "});\n"
    )
    block = extract_character_manager(text)
    assert block is not None
    assert block.code == text.rstrip("\n")


def test_resizer_between_character_parts_is_its_own_section() -> None:
    text = CHARACTER_LISTENER + "\n\n" + IFRAME_RESIZER + "\n\n" + CHARACTER_DEVICE + "\n"
    report = extract_report(text, classify(text))
    assert report.section_names == ["Character management", "H5P iframe resizer"]
    assert report.merged == {}
    sections = {section.feature: section.code for section in report.sections}
    assert sections[Feature.CHARACTER_MANAGER] == CHARACTER_LISTENER + "\n\n" + CHARACTER_DEVICE
    assert sections[Feature.IFRAME_RESIZE] == IFRAME_RESIZER

    output = splice(load_bundled("neo").script, report.sections)
    assert IFRAME_RESIZER in output
    assert CHARACTER_DEVICE in output


def test_phase_decorator_between_character_parts_is_kept() -> None:
    phase = (
        "//Phase management\n"
        "if ($('#nodeDecoration').length) {\n"
        "    $('#nodeDecoration').addClass('phase');\n"
        "}"
    )
    text = CHARACTER_LISTENER + "\n\n" + phase + "\n\n" + CHARACTER_DEVICE + "\n"
    report = extract_report(text, classify(text))
    assert report.section_names == ["Character management", "Phase management"]
    assert report.merged == {}


def test_character_parts_are_reported_in_source_order() -> None:
    text = CHARACTER_DEVICE + "\n\n" + CHARACTER_LISTENER + "\n"
    parts = character_manager_parts(text)
    assert [part.code for part in parts] == [CHARACTER_DEVICE, CHARACTER_LISTENER]
