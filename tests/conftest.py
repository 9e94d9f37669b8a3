from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from style_converter.config import AppConfig, RuntimeConfig

PRINT_HELPER = """printContent: function(id) {
        var s = "a{b}c";
        if (id) { return s; }
        window.print();
    }"""

SHARED_INIT = """common: {
        init: function() {
            //Phase management
            if ($("#nodeDecoration").length) {
                $("#nodeDecoration").addClass("phase-" + myTheme.phase);
            }
        }
    }"""

CHARACTER_LISTENER = """document.addEventListener("DOMContentLoaded", function() {
    var characters = document.querySelectorAll(".udl-character");
    for (var i = 0; i < characters.length; i++) {
        characters[i].setAttribute("tabindex", "0");
    }
});"""

CHARACTER_DEVICE = """if (typeof $exeDevice !== "undefined") {
    $exeDevice.characters = true;
}"""

IFRAME_RESIZER = """// H5P iframe Resizer
(function() {
    if (window.h5pResizerInitialized) return;
    window.h5pResizerInitialized = true;
    window.addEventListener("message", function(event) {
        if (event.data && event.data.context === "h5p") {
            event.source.postMessage({ context: "h5p", action: "resize" }, "*");
        }
    }, false);
})();"""

LEGACY_CONFIG = """<?xml version="1.0" encoding="UTF-8"?>
<theme>
    <name>oldstyle</name>
    <title>Old Style</title>
    <version>2.9</version>
    <compatibility>2.9</compatibility>
    <author>Jane Doe</author>
    <extra-head>&lt;script src="legacy.js"&gt;&lt;/script&gt;</extra-head>
</theme>
"""

LEGACY_CSS = """#toggle-nav { display: block; }
.no-nav #siteNav { display: none; }
#header { background: url(header.png) no-repeat; }
.exe-icon { background-image: url("arrow_icon.gif"); }
@font-face { font-family: Old; src: url('old.woff'); }
.logo { background: url(http://example.com/logo.png); }
"""


def _simple_members() -> str:
    members = []
    for name in ("init", "inIframe", "searchForm", "isLowRes", "checkNav"):
        body = "\n".join(f"        var {name}{index} = {index};" for index in range(13))
        members.append(f"    {name}: function() {{\n{body}\n    }},")
    return "\n".join(members)


@pytest.fixture
def simple_script() -> str:
    """Five plain members and the init call: 80 code lines, no feature markers."""

    return "var myTheme = {\n" + _simple_members() + "\n};\n$(function() {\n    myTheme.init();\n});\n"


@pytest.fixture
def all_features_script() -> str:
    return (
        "var myTheme = {\n"
        "    init: function() {\n"
        "        myTheme.common.init();\n"
        "    },\n"
        f"    {PRINT_HELPER},\n"
        f"    {SHARED_INIT}\n"
        "};\n\n"
        f"{CHARACTER_LISTENER}\n\n"
        f"{CHARACTER_DEVICE}\n\n"
        f"{IFRAME_RESIZER}\n"
    )


@pytest.fixture
def build_config() -> Callable[[Path], AppConfig]:
    def _build(output_dir: Path) -> AppConfig:
        runtime = RuntimeConfig()
        runtime.output_dir = output_dir
        return AppConfig(runtime=runtime)

    return _build


@pytest.fixture
def write_style(tmp_path: Path) -> Callable[..., Path]:
    """Create a v2.9 style folder; ``files`` maps relative paths to text or bytes."""

    def _write(name: str, files: dict[str, str | bytes]) -> Path:
        root = tmp_path / "styles" / name
        for relative, content in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def legacy_files(all_features_script: str) -> dict[str, str | bytes]:
    return {
        "oldstyle_js.js": all_features_script,
        "content.css": LEGACY_CSS,
        "nav.css": ".show-nav { display: block; }\n",
        "config.xml": LEGACY_CONFIG,
        "header.png": b"\x89PNG" + b"\x00" * 64,
        "arrow_icon.gif": b"GIF89a" + b"\x00" * 16,
        "old.woff": b"wOFF" + b"\x00" * 32,
        "screenshot.png": b"\x89PNG" + b"\x00" * 8,
        "notes.txt": "not an asset",
    }
