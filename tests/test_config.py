import json
from pathlib import Path

from style_converter.config import dump_config, load_config
from style_converter.settings import Settings, apply_settings, load_effective_config


def test_defaults_when_file_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    assert config.runtime.output_dir == Path("results")
    assert config.runtime.assets.icon_size_threshold_bytes == 50 * 1024
    assert config.templates.directory is None
    assert not config.api.enable_local_api


def test_load_config_reads_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        "[runtime]\n"
        'output_dir = "converted"\n'
        "create_zip = true\n"
        "parallelism = 4\n"
        "[runtime.assets]\n"
        "icon_size_threshold_kb = 10\n"
        "[templates]\n"
        'directory = "tpl"\n'
        "[api]\n"
        "enable_local_api = true\n"
        "port = 9000\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.runtime.output_dir == Path("converted")
    assert config.runtime.create_zip
    assert config.runtime.parallelism == 4
    assert config.runtime.assets.icon_size_threshold_bytes == 10 * 1024
    assert config.templates.directory == Path("tpl")
    assert config.api.enable_local_api
    assert config.api.port == 9000

    payload = json.loads(dump_config(config))
    assert payload["runtime"]["assets"]["icon_size_threshold_kb"] == 10
    assert payload["templates"]["directory"] == "tpl"


def test_settings_override_config(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    settings = Settings(enable_local_api=True, output_dir=tmp_path / "out", templates_dir=tmp_path / "tpl")
    apply_settings(config, settings)
    assert config.api.enable_local_api
    assert config.runtime.output_dir == tmp_path / "out"
    assert config.templates.directory == tmp_path / "tpl"


def test_explicit_path_wins_over_settings_path(tmp_path: Path) -> None:
    path = tmp_path / "explicit.toml"
    path.write_text('[runtime]\noutput_dir = "explicit"\n', encoding="utf-8")
    settings = Settings(config_path=tmp_path / "other.toml")
    assert load_effective_config(path, settings).runtime.output_dir == Path("explicit")
    assert load_effective_config(None, settings).runtime.output_dir == Path("results")
