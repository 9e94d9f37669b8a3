import pytest

from style_converter.script.complexity import ComplexityTier, select
from style_converter.script.features import FeatureFlags


@pytest.mark.parametrize(
    "flags",
    [
        FeatureFlags(iframe_resize=True),
        FeatureFlags(character_manager=True),
        FeatureFlags(phase_decorator=True),
        FeatureFlags(iframe_resize=True, print_helper=True),
    ],
)
def test_complex_features_select_page_title_template(flags: FeatureFlags) -> None:
    selection = select(flags, 10)
    assert selection.tier is ComplexityTier.COMPLEX
    assert selection.template_name == "neo"


@pytest.mark.parametrize(
    "flags",
    [
        FeatureFlags(print_helper=True),
        FeatureFlags(shared_init=True),
        FeatureFlags(custom_functions=("a", "b", "c")),
    ],
)
def test_moderate_features_select_base_template(flags: FeatureFlags) -> None:
    selection = select(flags, 10)
    assert selection.tier is ComplexityTier.MODERATE
    assert selection.template_name == "base"


def test_two_custom_functions_stay_simple() -> None:
    selection = select(FeatureFlags(custom_functions=("a", "b")), 10)
    assert selection.tier is ComplexityTier.SIMPLE
    assert selection.template_name == "base"


def test_line_count_threshold() -> None:
    assert select(FeatureFlags(), 300).tier is ComplexityTier.SIMPLE
    assert select(FeatureFlags(print_helper=True), 300).tier is ComplexityTier.MODERATE
    for line_count in (301, 317, 5000):
        selection = select(FeatureFlags(), line_count)
        assert selection.tier is ComplexityTier.COMPLEX
        assert selection.template_name == "neo"
