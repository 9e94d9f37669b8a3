import io
import zipfile
from pathlib import Path

import pytest

from style_converter.package import PackageError, build_zip, load_style, read_style_zip


def _zip_bytes(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def test_zip_strips_common_root_and_ignores_mac_metadata() -> None:
    data = _zip_bytes(
        {
            "mystyle/style_js.js": b"var a;",
            "mystyle/content.css": b"body {}",
            "mystyle/img/x.png": b"png",
            "__MACOSX/mystyle/._content.css": b"junk",
            "mystyle/.DS_Store": b"junk",
        }
    )
    package = read_style_zip(data, name="mystyle")
    assert sorted(package.files) == ["content.css", "img/x.png", "style_js.js"]
    assert package.find_script().name == "style_js.js"


def test_script_and_stylesheet_selection(write_style) -> None:
    root = write_style(
        "demo",
        {
            "a.js": "a",
            "style.js": "s",
            "demo_js.js": "legacy",
            "content.css": "c",
            "nav.css": "n",
            "extra.css": "e",
            "config.xml": "<theme/>",
        },
    )
    package = load_style(root)
    assert package.name == "demo"
    assert package.find_script().text == "legacy"
    assert [sheet.name for sheet in package.find_stylesheets()] == ["content.css", "nav.css"]
    assert package.find_metadata().name == "config.xml"


def test_stylesheets_sorted_without_content_nav_pair(write_style) -> None:
    package = load_style(write_style("demo", {"b.css": "b", "a.css": "a", "sub/c.css": "c"}))
    assert [sheet.name for sheet in package.find_stylesheets()] == ["a.css", "b.css"]
    assert package.find_script() is None


def test_text_strips_byte_order_mark(write_style) -> None:
    package = load_style(write_style("bom", {"style.js": "\ufeffvar a;"}))
    assert package.find_script().text == "var a;"


def test_invalid_inputs_raise(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.zip"
    bogus.write_text("not a zip", encoding="utf-8")
    with pytest.raises(PackageError):
        load_style(bogus)
    with pytest.raises(PackageError):
        load_style(tmp_path / "missing")
    with pytest.raises(PackageError):
        read_style_zip(b"garbage")


def test_build_zip_round_trip() -> None:
    data = build_zip([("style.js", b"js"), ("img/a.png", b"png"), ("../evil.txt", b"x")])
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert sorted(archive.namelist()) == ["img/a.png", "style.js"]
        assert archive.getinfo("style.js").compress_type == zipfile.ZIP_DEFLATED
