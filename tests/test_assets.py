from style_converter.package import StyleFile, StylePackage
from style_converter.rewriters.assets import AssetCategory, asset_locations, categorize, plan_assets, summarize


def _package(files: dict[str, bytes]) -> StylePackage:
    return StylePackage(name="demo", files={path: StyleFile(path=path, data=data) for path, data in files.items()})


def test_categorize_by_name_and_extension() -> None:
    assert categorize("menu_icon.png") is AssetCategory.ICONS
    assert categorize("bullet.gif") is AssetCategory.ICONS
    assert categorize("font.woff2") is AssetCategory.FONTS
    assert categorize("Font.TTF") is AssetCategory.FONTS
    assert categorize("header.jpg") is AssetCategory.IMG
    assert categorize("readme.md") is None
    assert categorize("screenshot.png") is None
    assert categorize("script.js") is None


def test_svg_size_threshold() -> None:
    assert categorize("logo.svg", size=1024) is AssetCategory.ICONS
    assert categorize("logo.svg", size=80 * 1024) is AssetCategory.IMG
    assert categorize("logo.svg") is AssetCategory.IMG
    assert categorize("logo.svg", size=80 * 1024, threshold_bytes=100 * 1024) is AssetCategory.ICONS


def test_plan_prefers_root_files_over_nested_duplicates() -> None:
    package = _package(
        {
            "img/header.png": b"nested",
            "header.png": b"root",
            "fonts/a.woff": b"font",
            "style.css": b"",
            "_notes/readme.txt": b"skip",
        }
    )
    moves = plan_assets(package)
    assert [move.destination for move in moves] == ["fonts/a.woff", "img/header.png"]
    header = next(move for move in moves if move.destination == "img/header.png")
    assert header.source == "header.png"
    assert asset_locations(moves) == {"a.woff": "fonts/a.woff", "header.png": "img/header.png"}
    assert summarize(moves) == {"fonts": 1, "img": 1}
