from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import Response

from . import __version__
from .core import ConversionError, StyleConversionService
from .package import PackageError, StylePackage, build_zip, read_style_zip
from .schemas import HealthStatus, ScriptAnalysisResponse
from .settings import load_effective_config
from .utils import slugify

ZIP_MEDIA_TYPE = "application/zip"


def _status_for(exc: ConversionError) -> int:
    return 400 if exc.code in {"NOT_FOUND", "INVALID_PACKAGE"} else 422


def create_app(config_path: Path | None = None, *, require_enabled: bool = True) -> FastAPI:
    config = load_effective_config(config_path)
    if require_enabled and not config.api.enable_local_api:
        raise RuntimeError("Local API is disabled. Enable it via config.api.enable_local_api")
    service = StyleConversionService(config)
    app = FastAPI(title="eXeLearning Style Converter", version=__version__)
    app.state.config = config
    app.state.service = service
    max_bytes = config.api.max_upload_mb * 1024 * 1024

    async def read_upload(file: UploadFile) -> StylePackage:
        content = await file.read()
        if len(content) > max_bytes:
            raise HTTPException(status_code=413, detail="SIZE_LIMIT")
        name = Path(file.filename or "upload.zip").stem
        try:
            return read_style_zip(content, name=name)
        except PackageError as exc:
            raise HTTPException(status_code=400, detail="INVALID_PACKAGE") from exc

    @app.get("/health", response_model=HealthStatus)
    def health() -> HealthStatus:
        return HealthStatus(status="ok", version=__version__, templates=service.templates.names())

    @app.post("/analyze", response_model=ScriptAnalysisResponse)
    async def analyze(file: UploadFile = File(...)) -> ScriptAnalysisResponse:
        package = await read_upload(file)
        try:
            conversion = service.analyze(package)
        except ConversionError as exc:
            raise HTTPException(status_code=_status_for(exc), detail=exc.code) from exc
        return ScriptAnalysisResponse.from_conversion(slugify(package.name), conversion)

    @app.post("/convert")
    async def convert(file: UploadFile = File(...)) -> Response:
        package = await read_upload(file)
        try:
            style = service.convert_in_memory(package)
        except ConversionError as exc:
            raise HTTPException(status_code=_status_for(exc), detail=exc.code) from exc
        analysis = style.script.analysis
        headers = {
            "Content-Disposition": f'attachment; filename="{style.zip_name}"',
            "X-Style-Name": style.name,
            "X-Complexity": analysis.tier.value,
            "X-Template": analysis.template_name,
            "X-Preserved-Sections": ", ".join(style.script.integrated),
            "X-Validation": "passed" if style.validation.is_valid else "failed",
            "X-Warnings": ", ".join(style.warnings),
        }
        return Response(content=build_zip(style.files.items()), media_type=ZIP_MEDIA_TYPE, headers=headers)

    return app


__all__ = ["create_app"]
