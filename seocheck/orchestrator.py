"""Batch pipeline: discover pages, analyze them concurrently, aggregate and score."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional

from .aggregator import aggregate
from .config import SeoCheckConfig, load_config
from .logging import get_logger
from .models import AnalysisReport, PageRecord, RobotsVerdict
from .page import PageAnalyzer
from .project import (
    PageDiscovery,
    ProjectLayout,
    detect_layout,
    read_robots_verdict,
    read_sitemap_urls,
)
from .sandbox import Engine, SandboxEvaluator
from .scoring import ScoringEngine, sitemap_coverage


class Orchestrator:
    """Coordinates a single analysis run over a project."""

    def __init__(
        self,
        scoring: ScoringEngine | None = None,
        *,
        engine: Engine | None = None,
    ) -> None:
        self.scoring = scoring or ScoringEngine()
        self._engine = engine
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        config_path: Path | None = None,
        config: SeoCheckConfig | None = None,
        use_sandbox: bool | None = None,
        workers: int | None = None,
    ) -> AnalysisReport:
        """Analyze the project at ``path`` and return the scored report.

        Raises :class:`~seocheck.project.ProjectLayoutError` when no page
        directory exists and :class:`~seocheck.config.ConfigError` for a
        malformed configuration file. Every other problem is recorded on the
        report as a warning or error. A preloaded ``config`` skips reading
        ``.seocheck.yml`` again.
        """
        root = Path(path).expanduser().resolve()
        if config is None:
            config = load_config(config_path or root)
        config.root = root

        layout = detect_layout(config)
        self.logger.info("Starting SEO check for %s", layout.project_name)
        self.logger.debug("Pages directory: %s", _relative(layout.pages_dir, root))

        warnings: List[str] = []
        errors: List[str] = []

        sandbox_enabled = config.sandbox.enabled if use_sandbox is None else use_sandbox
        evaluator: Optional[SandboxEvaluator] = None
        if sandbox_enabled:
            if layout.seo_util_file is None:
                warnings.append("SEO utility file not found - pages analyzed statically")
            evaluator = SandboxEvaluator(
                root,
                util_file=layout.seo_util_file,
                timeout_ms=config.sandbox.timeout_ms,
                origin=config.sandbox.origin,
                engine=self._engine,
            )

        discovery = PageDiscovery(layout.pages_dir, layout.ignore_paths)
        page_paths = discovery.find()
        errors.extend(discovery.errors)
        self.logger.info("Found %d page files", len(page_paths))

        records = self._analyze_pages(
            discovery,
            page_paths,
            PageAnalyzer(evaluator),
            workers=workers or config.workers,
            errors=errors,
        )
        merged = aggregate(records)

        listed = self._read_sitemap(layout, warnings, errors)
        coverage = sitemap_coverage(
            merged,
            listed,
            source=_relative(layout.sitemap_file, root) if layout.sitemap_file else None,
        )
        robots = self._read_robots(layout, errors)

        card = self.scoring.score(merged, sitemap=coverage, robots=robots)
        report = AnalysisReport(
            project_name=layout.project_name,
            pages_dir=_relative(layout.pages_dir, root),
            categories=card.categories,
            pages_with_seo=merged.pages_with_seo,
            pages_without_seo=merged.pages_without_seo,
            image_usage=merged.image_usage,
            pages_without_image=merged.pages_without_image,
            sitemap=card.sitemap,
            robots=robots,
            recommendations=card.recommendations,
            quick_fixes=card.quick_fixes,
            warnings=warnings,
            errors=errors,
            total_images=card.total_images,
            images_without_alt=card.images_without_alt,
        )
        self.logger.info(
            "SEO check finished: %s/%s (%d%%)",
            report.total_score,
            report.max_score,
            report.overall_percentage,
        )
        return report

    # ------------------------------------------------------------------
    # Internal helpers

    def _analyze_pages(
        self,
        discovery: PageDiscovery,
        page_paths: List[Path],
        analyzer: PageAnalyzer,
        *,
        workers: int,
        errors: List[str],
    ) -> List[PageRecord]:
        def _analyze(path: Path) -> PageRecord:
            return analyzer.analyze(discovery.load(path))

        records: List[PageRecord] = []
        if workers <= 1 or len(page_paths) <= 1:
            outcomes = [(path, self._guard(_analyze, path)) for path in page_paths]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    (path, executor.submit(self._guard, _analyze, path)) for path in page_paths
                ]
                outcomes = [(path, future.result()) for path, future in futures]

        for path, outcome in outcomes:
            if isinstance(outcome, PageRecord):
                records.append(outcome)
                if outcome.sandbox_note:
                    self.logger.debug("%s: %s", outcome.path, outcome.sandbox_note)
                continue
            message = f"Error reading file {path}: {outcome}"
            self.logger.warning(message)
            errors.append(message)
        return records

    @staticmethod
    def _guard(func: Callable[[Path], PageRecord], path: Path) -> PageRecord | Exception:
        try:
            return func(path)
        except (OSError, UnicodeDecodeError) as exc:
            return exc

    def _read_sitemap(
        self, layout: ProjectLayout, warnings: List[str], errors: List[str]
    ) -> List[str]:
        if layout.sitemap_file is None:
            warnings.append("Sitemap file not found - checked common locations")
            return []
        try:
            return read_sitemap_urls(layout.sitemap_file)
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Error reading sitemap: {exc}"
            self.logger.warning(message)
            errors.append(message)
            return []

    def _read_robots(self, layout: ProjectLayout, errors: List[str]) -> RobotsVerdict:
        try:
            return read_robots_verdict(layout.root, layout.framework_config)
        except (OSError, UnicodeDecodeError) as exc:
            source = layout.framework_config.name if layout.framework_config else "robots source"
            message = f"Error reading {source}: {exc}"
            self.logger.warning(message)
            errors.append(message)
            return RobotsVerdict(configured=False, message="Robots configuration unreadable")


def _relative(path: Optional[Path], root: Path) -> str:
    if path is None:
        return ""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = ["Orchestrator"]
