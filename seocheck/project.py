"""Project layout detection, page discovery, and sitemap/robots readers."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import SeoCheckConfig
from .logging import get_logger
from .models import RobotsVerdict, SourceDocument
from .sandbox import DEFAULT_UTIL_CANDIDATES

PAGES_DIR_CANDIDATES: tuple[str, ...] = ("app/pages", "pages", "src/pages")
SITEMAP_CANDIDATES: tuple[str, ...] = (
    "server/api/sitemap/static.ts",
    "server/api/sitemap.ts",
    "server/sitemap.ts",
)
FRAMEWORK_CONFIG_CANDIDATES: tuple[str, ...] = ("nuxt.config.ts", "nuxt.config.js")
ROBOTS_TXT = "public/robots.txt"
PAGE_SUFFIX = ".vue"

_EXCLUDED_DIRS = {".git", "node_modules", ".nuxt", ".output"}

_LOC_RE = re.compile(r"loc:\s*[`'\"]([^`'\"]+)[`'\"]")
_IMAGE_URL_MARKERS: tuple[str, ...] = ("/img/", ".png", ".jpg")

logger = get_logger("project")


class ProjectLayoutError(RuntimeError):
    """Raised when the project has no recognizable page directory."""


@dataclass
class ProjectLayout:
    """Resolved locations of the files a run depends on."""

    root: Path
    pages_dir: Path
    sitemap_file: Optional[Path] = None
    framework_config: Optional[Path] = None
    seo_util_file: Optional[Path] = None
    ignore_paths: List[str] = field(default_factory=list)

    @property
    def project_name(self) -> str:
        return self.root.name or "project"


def detect_layout(config: SeoCheckConfig) -> ProjectLayout:
    """Resolve layout paths, honoring configured overrides before common locations."""
    root = config.root
    pages_dir = _existing(config.pages_dir) or _first_existing(root, PAGES_DIR_CANDIDATES)
    if pages_dir is None or not pages_dir.is_dir():
        searched = ", ".join(PAGES_DIR_CANDIDATES)
        raise ProjectLayoutError(f"Could not find a pages directory (searched: {searched})")
    return ProjectLayout(
        root=root,
        pages_dir=pages_dir,
        sitemap_file=_existing(config.sitemap_file)
        or _first_existing(root, SITEMAP_CANDIDATES),
        framework_config=_existing(config.framework_config)
        or _first_existing(root, FRAMEWORK_CONFIG_CANDIDATES),
        seo_util_file=_existing(config.seo_util_file)
        or _first_existing(root, DEFAULT_UTIL_CANDIDATES),
        ignore_paths=list(config.ignore_paths),
    )


def _existing(path: Optional[Path]) -> Optional[Path]:
    if path is not None and path.exists():
        return path
    return None


def _first_existing(root: Path, candidates: Sequence[str]) -> Optional[Path]:
    for candidate in candidates:
        path = root / candidate
        if path.exists():
            return path
    return None


class PageDiscovery:
    """Finds page components under the page root and loads them as documents."""

    def __init__(self, pages_dir: Path, ignore_paths: Sequence[str] = ()) -> None:
        self.pages_dir = pages_dir
        self.ignore_paths = tuple(ignore_paths)
        self.errors: List[str] = []

    def find(self) -> List[Path]:
        """Return page files in a stable order, skipping ignored paths."""
        pages: List[Path] = []
        for path in sorted(self._iter_pages()):
            relative = path.relative_to(self.pages_dir).as_posix()
            if self.is_ignored(relative):
                logger.debug("Skipping ignored page %s", relative)
                continue
            pages.append(path)
        return pages

    def is_ignored(self, relative_path: str) -> bool:
        return any(ignore in relative_path for ignore in self.ignore_paths)

    def load(self, path: Path) -> SourceDocument:
        """Read a page file; raises ``OSError``/``UnicodeDecodeError`` on failure."""
        relative = path.relative_to(self.pages_dir).as_posix()
        text = path.read_text(encoding="utf-8")
        name = relative[: -len(PAGE_SUFFIX)] if relative.endswith(PAGE_SUFFIX) else relative
        return SourceDocument(path=relative, name=name, text=text)

    def _iter_pages(self) -> Iterator[Path]:
        def _on_error(exc: OSError) -> None:
            message = f"Error reading directory {exc.filename}: {exc.strerror or exc}"
            logger.warning(message)
            self.errors.append(message)

        for dirpath, dirnames, filenames in os.walk(self.pages_dir, onerror=_on_error):
            dirnames[:] = [name for name in dirnames if name not in _EXCLUDED_DIRS]
            current = Path(dirpath)
            for filename in filenames:
                if filename.endswith(PAGE_SUFFIX):
                    yield current / filename


def read_sitemap_urls(path: Path) -> List[str]:
    """Extract page URLs declared with ``loc:`` in a sitemap source file.

    Leading slashes are dropped and image entries are filtered out.
    """
    text = path.read_text(encoding="utf-8")
    urls: List[str] = []
    for match in _LOC_RE.finditer(text):
        url = match.group(1)
        if any(marker in url for marker in _IMAGE_URL_MARKERS):
            continue
        urls.append(url[1:] if url.startswith("/") else url)
    return urls


def read_robots_verdict(root: Path, framework_config: Optional[Path]) -> RobotsVerdict:
    """Decide whether crawler rules are configured via the robots module or robots.txt."""
    content = ""
    if framework_config is not None:
        content = framework_config.read_text(encoding="utf-8")

    has_module = "@nuxtjs/robots" in content
    has_config = "robots:" in content

    if has_module and has_config:
        return RobotsVerdict(
            configured=True,
            source="@nuxtjs/robots",
            message="Robots configuration found in nuxt.config",
            has_environment_rules=(
                "process.env.ENV_TYPE" in content or "process.env.NODE_ENV" in content
            ),
        )
    if has_module:
        return RobotsVerdict(
            configured=True,
            source="@nuxtjs/robots",
            message="Robots module installed but no configuration found",
        )
    if (root / ROBOTS_TXT).is_file():
        return RobotsVerdict(
            configured=True,
            source="static file",
            message="Static robots.txt file found",
        )
    return RobotsVerdict(configured=False, message="No robots configuration found")


__all__ = [
    "PAGES_DIR_CANDIDATES",
    "PageDiscovery",
    "ProjectLayout",
    "ProjectLayoutError",
    "detect_layout",
    "read_robots_verdict",
    "read_sitemap_urls",
]
