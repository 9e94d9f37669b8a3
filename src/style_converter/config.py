from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


CONFIG_FILE = Path("config.toml")


@dataclass(slots=True)
class AssetConfig:
    icon_size_threshold_kb: int = 50

    @property
    def icon_size_threshold_bytes(self) -> int:
        return self.icon_size_threshold_kb * 1024


@dataclass(slots=True)
class RuntimeConfig:
    output_dir: Path = Path("results")
    log_file: str = "log.jsonl"
    summary_csv: str = "summary.csv"
    report_file: str = "conversion-report.md"
    create_zip: bool = False
    parallelism: int = 1
    assets: AssetConfig = field(default_factory=AssetConfig)


@dataclass(slots=True)
class TemplateConfig:
    directory: Path | None = None


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    enable_local_api: bool = False
    max_upload_mb: int = 25


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _build_assets(data: Mapping[str, object] | None) -> AssetConfig:
    if not data:
        return AssetConfig()
    return AssetConfig(icon_size_threshold_kb=int(data.get("icon_size_threshold_kb", 50)))


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    assets = data.get("assets")
    return RuntimeConfig(
        output_dir=Path(str(data.get("output_dir", "results"))),
        log_file=str(data.get("log_file", "log.jsonl")),
        summary_csv=str(data.get("summary_csv", "summary.csv")),
        report_file=str(data.get("report_file", "conversion-report.md")),
        create_zip=bool(data.get("create_zip", False)),
        parallelism=int(data.get("parallelism", 1)),
        assets=_build_assets(assets if isinstance(assets, Mapping) else None),
    )


def _build_templates(data: Mapping[str, object] | None) -> TemplateConfig:
    if not data:
        return TemplateConfig()
    directory = data.get("directory")
    return TemplateConfig(directory=Path(str(directory)) if directory else None)


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(
        host=str(data.get("host", "127.0.0.1")),
        port=int(data.get("port", 8000)),
        enable_local_api=bool(data.get("enable_local_api", False)),
        max_upload_mb=int(data.get("max_upload_mb", 25)),
    )


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    runtime_data = raw.get("runtime")
    templates_data = raw.get("templates")
    api_data = raw.get("api")
    return AppConfig(
        runtime=_build_runtime(runtime_data if isinstance(runtime_data, Mapping) else None),
        templates=_build_templates(templates_data if isinstance(templates_data, Mapping) else None),
        api=_build_api(api_data if isinstance(api_data, Mapping) else None),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "runtime": {
            "output_dir": str(config.runtime.output_dir),
            "log_file": config.runtime.log_file,
            "summary_csv": config.runtime.summary_csv,
            "report_file": config.runtime.report_file,
            "create_zip": config.runtime.create_zip,
            "parallelism": config.runtime.parallelism,
            "assets": {
                "icon_size_threshold_kb": config.runtime.assets.icon_size_threshold_kb,
            },
        },
        "templates": {
            "directory": str(config.templates.directory) if config.templates.directory else "",
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
            "enable_local_api": config.api.enable_local_api,
            "max_upload_mb": config.api.max_upload_mb,
        },
    }
    return json.dumps(payload, indent=2)
