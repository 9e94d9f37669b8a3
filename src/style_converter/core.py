from __future__ import annotations

import concurrent.futures
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .config import AppConfig
from .logging import BatchSummary, RunLogEntry, RunLogger, StageTimings, append_summary_row
from .models import BatchConversionResult, ConversionOptions, ConversionResult, ConvertedStyle
from .package import PackageError, StylePackage, build_zip, load_style
from .report import render_report
from .rewriters.assets import CARRIED_ROOT_FILES, AssetMove, asset_locations, plan_assets
from .rewriters.base import RewriteResponse
from .rewriters.metadata import rewrite_metadata
from .rewriters.stylesheet import rewrite_stylesheets
from .script.splicer import TemplateAnchorError
from .script.transformer import ScriptConversion, transform_script
from .templates import TemplateLibrary, TemplateNotFoundError
from .utils import atomic_write, atomic_write_bytes, generate_run_id, iter_style_sources, slugify
from .validator import validate


class ConversionError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class _StylePaths:
    output_dir: Path
    log_file: Path
    report_file: Path
    zip_file: Path


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _style_name(path: Path) -> str:
    return path.stem if path.suffix.lower() == ".zip" else path.name


class StyleConversionService:
    def __init__(self, config: AppConfig, templates: TemplateLibrary | None = None) -> None:
        self._config = config
        self._templates = templates or TemplateLibrary(config.templates.directory)

    @property
    def templates(self) -> TemplateLibrary:
        return self._templates

    def load(self, path: Path) -> StylePackage:
        if not path.exists():
            raise ConversionError("NOT_FOUND", f"Input path does not exist: {path}")
        try:
            return load_style(path)
        except PackageError as exc:
            raise ConversionError("INVALID_PACKAGE", str(exc)) from exc

    def analyze(self, package: StylePackage) -> ScriptConversion:
        """Run the script pipeline only, to preview tier, template and preserved sections."""

        script = package.find_script()
        return self._transform_script(script.text if script is not None else "")

    def convert_style(
        self,
        path: Path,
        *,
        run_id: str | None = None,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        opts = options or ConversionOptions()
        run_id = run_id or generate_run_id()
        read_start = time.perf_counter()
        try:
            package = self.load(path)
        except ConversionError as exc:
            self._log_failure(_style_name(path), str(path), run_id, exc, opts)
            raise
        return self.convert_package(
            package,
            run_id=run_id,
            options=opts,
            source=str(path),
            read_ms=_elapsed_ms(read_start),
        )

    def convert_package(
        self,
        package: StylePackage,
        *,
        run_id: str | None = None,
        options: ConversionOptions | None = None,
        source: str | None = None,
        read_ms: float = 0.0,
    ) -> ConversionResult:
        opts = options or ConversionOptions()
        run_id = run_id or generate_run_id()
        source = source or package.name
        start = time.perf_counter()
        timings = StageTimings(read_ms=read_ms)
        try:
            style = self._convert_internal(package, timings)
        except ConversionError as exc:
            self._log_failure(package.name, source, run_id, exc, opts)
            raise

        paths = self._style_paths(style.name)
        result = ConversionResult(run_id=run_id, style=style, summary="")
        if not opts.dry_run:
            write_start = time.perf_counter()
            self._write_output(style, paths)
            result.output_dir = paths.output_dir
            result.report_path = paths.report_file
            if self._should_zip(opts):
                atomic_write_bytes(paths.zip_file, build_zip(style.files.items()))
                result.zip_path = paths.zip_file
            timings.write_ms = _elapsed_ms(write_start)
            self._append_success_log(run_id, source, style, paths, timings)

        elapsed = time.perf_counter() - start
        target = "dry run" if opts.dry_run else str(paths.output_dir)
        result.summary = (
            f"Converted {style.name} ({style.script.analysis.tier.value}, "
            f"template {style.script.analysis.template_name}) -> {target} in {elapsed:.2f}s"
        )
        return result

    def convert_in_memory(self, package: StylePackage) -> ConvertedStyle:
        """Convert without touching the filesystem, as the upload API does."""

        return self._convert_internal(package, StageTimings())

    def _convert_internal(self, package: StylePackage, timings: StageTimings) -> ConvertedStyle:
        warnings: list[str] = []

        analyze_start = time.perf_counter()
        script_file = package.find_script()
        if script_file is None:
            warnings.append("NO_SCRIPT")
        conversion = self._transform_script(script_file.text if script_file is not None else "")
        warnings.extend(f"SECTION_SKIPPED:{name}" for name in conversion.skipped)
        timings.analyze_ms = _elapsed_ms(analyze_start)

        transform_start = time.perf_counter()
        moves = plan_assets(package, self._config.runtime.assets.icon_size_threshold_bytes)
        css = rewrite_stylesheets(
            package.find_stylesheets(), asset_locations(moves), fallback=conversion.template.style
        )
        metadata_file = package.find_metadata()
        config = rewrite_metadata(
            metadata_file.data if metadata_file is not None else None,
            package.name,
            conversion.template.metadata,
        )
        warnings.extend(css.warnings)
        warnings.extend(config.warnings)

        files = self._collect_files(package, conversion, css, config, moves)
        validation = validate(files)
        if not validation.is_valid:
            warnings.append("VALIDATION_FAILED")
        timings.transform_ms = _elapsed_ms(transform_start)

        style = ConvertedStyle(
            name=slugify(package.name),
            files=files,
            script=conversion,
            css_changes=css.changes,
            config_changes=config.changes,
            assets=moves,
            validation=validation,
            warnings=warnings,
        )
        style.report = render_report(style)
        return style

    def _transform_script(self, text: str) -> ScriptConversion:
        try:
            return transform_script(text, self._templates.load)
        except TemplateNotFoundError as exc:
            raise ConversionError("MISSING_TEMPLATE", str(exc)) from exc
        except TemplateAnchorError as exc:
            raise ConversionError("TEMPLATE_ANCHOR", str(exc)) from exc

    def _collect_files(
        self,
        package: StylePackage,
        conversion: ScriptConversion,
        css: RewriteResponse,
        config: RewriteResponse,
        moves: list[AssetMove],
    ) -> dict[str, bytes]:
        files = {
            "config.xml": config.content.encode("utf-8"),
            "style.js": conversion.script.encode("utf-8"),
            "style.css": css.content.encode("utf-8"),
        }
        for name in CARRIED_ROOT_FILES:
            carried = package.get(name)
            if carried is not None:
                files[name] = carried.data
        for move in moves:
            files[move.destination] = package.files[move.source].data
        return files

    def _style_paths(self, name: str) -> _StylePaths:
        root = self._config.runtime.output_dir
        output_dir = root / name
        return _StylePaths(
            output_dir=output_dir,
            log_file=output_dir / self._config.runtime.log_file,
            report_file=output_dir / self._config.runtime.report_file,
            zip_file=root / f"{name}-3.0.zip",
        )

    def _should_zip(self, options: ConversionOptions) -> bool:
        if options.create_zip is not None:
            return options.create_zip
        return self._config.runtime.create_zip

    def _write_output(self, style: ConvertedStyle, paths: _StylePaths) -> None:
        for relative, data in style.files.items():
            atomic_write_bytes(paths.output_dir / relative, data)
        atomic_write(paths.report_file, style.report)

    def _append_success_log(
        self,
        run_id: str,
        source: str,
        style: ConvertedStyle,
        paths: _StylePaths,
        timings: StageTimings,
    ) -> None:
        RunLogger(paths.log_file).append(
            RunLogEntry(
                run_id=run_id,
                style=style.name,
                source=source,
                status="success",
                tier=style.script.analysis.tier.value,
                template=style.script.analysis.template_name,
                integrated=style.script.integrated,
                skipped=style.script.skipped,
                warnings=style.warnings,
                error_code=None,
                timings=timings,
                output_path=str(paths.output_dir),
                assets=[move.destination for move in style.assets],
            )
        )

    def _log_failure(
        self,
        name: str,
        source: str,
        run_id: str,
        exc: ConversionError,
        options: ConversionOptions,
    ) -> None:
        if options.dry_run:
            return
        paths = self._style_paths(slugify(name))
        RunLogger(paths.log_file).append(
            RunLogEntry(
                run_id=run_id,
                style=slugify(name),
                source=source,
                status="failure",
                tier=None,
                template=None,
                integrated=[],
                skipped=[],
                warnings=[],
                error_code=exc.code,
                timings=StageTimings(),
                output_path=str(paths.output_dir),
                assets=[],
            )
        )

    def batch_convert(
        self,
        inputs: Sequence[Path],
        *,
        parallelism: int | None = None,
        options: ConversionOptions | None = None,
    ) -> BatchConversionResult:
        opts = options or ConversionOptions()
        paths = list(iter_style_sources(inputs))
        summary = BatchSummary(total=len(paths))
        parallelism = max(1, parallelism or self._config.runtime.parallelism)
        if parallelism == 1:
            results = self._run_sequential_batch(paths, summary, opts)
        else:
            results = self._run_parallel_batch(paths, summary, opts, parallelism)
        for result in results:
            summary.count_warnings(result.warnings)
        if paths and not opts.dry_run:
            summary_path = self._config.runtime.output_dir / self._config.runtime.summary_csv
            append_summary_row(summary_path, summary.as_row(generate_run_id("batch")))
        return BatchConversionResult(runs=results, summary=summary)

    def _run_sequential_batch(
        self, paths: Sequence[Path], summary: BatchSummary, options: ConversionOptions
    ) -> list[ConversionResult]:
        results: list[ConversionResult] = []
        for path in paths:
            try:
                result = self.convert_style(path, options=options)
            except ConversionError as exc:
                summary.failures += 1
                summary.failed[str(path)] = f"{exc.code}: {exc}"
                continue
            results.append(result)
            summary.successes += 1
        return results

    def _run_parallel_batch(
        self,
        paths: Sequence[Path],
        summary: BatchSummary,
        options: ConversionOptions,
        parallelism: int,
    ) -> list[ConversionResult]:
        results: list[ConversionResult] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=parallelism) as executor:
            future_map = {
                executor.submit(self.convert_style, path, options=options): path for path in paths
            }
            for future in concurrent.futures.as_completed(future_map):
                path = future_map[future]
                try:
                    result = future.result()
                except ConversionError as exc:
                    summary.failures += 1
                    summary.failed[str(path)] = f"{exc.code}: {exc}"
                    continue
                results.append(result)
                summary.successes += 1
        results.sort(key=lambda result: result.style_name)
        return results


__all__ = [
    "BatchConversionResult",
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "StyleConversionService",
]
