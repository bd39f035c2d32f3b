"""Core data models shared across seocheck components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

COLLECTION_FIELDS: tuple[str, ...] = ("faqs", "products", "services", "branches", "news")
FLAG_FIELDS: tuple[str, ...] = ("grant", "contactPage", "awards", "breadcrumb")


@dataclass(frozen=True)
class SourceDocument:
    """A page source file read from the page root."""

    path: str
    name: str
    text: str


@dataclass
class ParameterSet:
    """Arguments recovered from a ``generateSEO({...})`` call site."""

    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    collections: Dict[str, int] = field(default_factory=dict)
    flags: List[str] = field(default_factory=list)

    def count(self, name: str) -> int:
        return self.collections.get(name, 0)

    def has_flag(self, name: str) -> bool:
        return name in self.flags

    def to_arguments(self) -> Dict[str, Any]:
        """Return a JSON-ready argument object for the sandboxed call.

        Collection counts become arrays of placeholder objects so the
        generator's length checks and ``map`` calls see the right shape.
        """
        arguments: Dict[str, Any] = {}
        for key in ("title", "description", "image"):
            value = getattr(self, key)
            if value is not None:
                arguments[key] = value
        for name, count in self.collections.items():
            arguments[name] = [
                {"name": f"{name}-{index}", "question": f"{name}-{index}", "answer": ""}
                for index in range(1, count + 1)
            ]
        for name in self.flags:
            arguments[name] = {}
        return arguments


@dataclass
class SandboxResult:
    """Outcome of a dynamic ``generateSEO`` evaluation."""

    output: Optional[Dict[str, Any]] = None
    note: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.output is not None


@dataclass(frozen=True)
class SchemaType:
    """Structured-data type emitted for a page, optionally with an instance count."""

    name: str
    count: Optional[int] = None
    unit: Optional[str] = None

    @property
    def label(self) -> str:
        if self.count is None:
            return self.name
        return f"{self.name} ({self.count} {self.unit or 'items'})"


@dataclass
class MetadataRecord:
    """Canonical metadata view of a single page."""

    title: Optional[str] = None
    title_length: int = 0
    title_band: Optional[str] = None
    description: Optional[str] = None
    description_length: int = 0
    description_band: Optional[str] = None
    og_tags: Dict[str, bool] = field(default_factory=dict)
    twitter_tags: Dict[str, bool] = field(default_factory=dict)
    canonical: bool = False
    schemas: List[SchemaType] = field(default_factory=list)
    image: Optional[str] = None
    og_image: Optional[str] = None
    issues: List[str] = field(default_factory=list)
    source: str = "static"

    def add_issue(self, issue: str) -> None:
        self.issues.append(issue)


@dataclass
class HeadingInfo:
    """Heading counts and hierarchy problems for a page template."""

    h1_count: int = 0
    levels: List[int] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)


@dataclass
class ImageInfo:
    """Image and alt-text statistics for a page template."""

    total: int = 0
    with_alt: int = 0
    without_alt: int = 0
    lazy: int = 0
    issues: List[str] = field(default_factory=list)


@dataclass
class PageRecord:
    """Everything learned about one page."""

    path: str
    name: str
    uses_generate_seo: bool
    uses_seo_meta: bool
    uses_head: bool
    metadata: MetadataRecord
    headings: HeadingInfo
    images: ImageInfo
    params: Optional[ParameterSet] = None
    sandbox_note: Optional[str] = None

    @property
    def has_seo(self) -> bool:
        return (self.uses_generate_seo or self.uses_seo_meta) and self.uses_head

    @property
    def url(self) -> str:
        """Public path of the page as it would appear in the sitemap."""
        name = self.name
        if name == "index":
            return "/"
        if name.endswith("/index"):
            name = name[: -len("/index")]
        return f"/{name}"


class ImageUsageIndex:
    """Maps an image reference to the pages that use it, in first-seen order."""

    def __init__(self) -> None:
        self._usage: Dict[str, List[str]] = {}

    def add(self, image: str, page: str) -> None:
        pages = self._usage.setdefault(image, [])
        if page not in pages:
            pages.append(page)

    def pages_for(self, image: str) -> List[str]:
        return list(self._usage.get(image, []))

    def is_duplicate(self, image: Optional[str]) -> bool:
        if not image:
            return False
        return len(self._usage.get(image, [])) > 1

    def duplicates(self) -> List[Tuple[str, List[str]]]:
        found = [(image, list(pages)) for image, pages in self._usage.items() if len(pages) > 1]
        return sorted(found, key=lambda item: len(item[1]), reverse=True)

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for image, pages in self._usage.items():
            yield image, list(pages)

    def page_total(self) -> int:
        return sum(len(pages) for pages in self._usage.values())

    def to_dict(self) -> Dict[str, List[str]]:
        return {image: list(pages) for image, pages in self._usage.items()}

    def __len__(self) -> int:
        return len(self._usage)

    def __contains__(self, image: object) -> bool:
        return image in self._usage


@dataclass
class CategoryScore:
    """Points earned in one of the five scoring buckets."""

    key: str
    name: str
    score: float = 0
    max_score: int = 20
    issues: List[str] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        if not self.max_score:
            return 0
        return round_half_up(self.score / self.max_score * 100)


@dataclass
class SitemapCoverage:
    """Declared sitemap URLs and covered pages that are absent from them."""

    source: Optional[str] = None
    listed: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


@dataclass
class RobotsVerdict:
    """Whether crawler rules are configured for the project."""

    configured: bool = False
    source: Optional[str] = None
    message: str = "No robots configuration found"
    has_environment_rules: bool = False


@dataclass
class AnalysisReport:
    """Terminal result of a run, consumed by the report renderer."""

    project_name: str
    pages_dir: str
    categories: List[CategoryScore]
    pages_with_seo: List[PageRecord]
    pages_without_seo: List[PageRecord]
    image_usage: ImageUsageIndex
    pages_without_image: List[str]
    sitemap: SitemapCoverage
    robots: RobotsVerdict
    recommendations: List[str] = field(default_factory=list)
    quick_fixes: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    total_images: int = 0
    images_without_alt: int = 0

    @property
    def total_score(self) -> float:
        return sum(category.score for category in self.categories)

    @property
    def max_score(self) -> int:
        return sum(category.max_score for category in self.categories)

    @property
    def overall_percentage(self) -> int:
        if not self.max_score:
            return 0
        return round_half_up(self.total_score / self.max_score * 100)

    @property
    def total_pages(self) -> int:
        return len(self.pages_with_seo) + len(self.pages_without_seo)

    def category(self, key: str) -> CategoryScore:
        for category in self.categories:
            if category.key == key:
                return category
        raise KeyError(key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project_name,
            "pages_dir": self.pages_dir,
            "score": self.total_score,
            "max_score": self.max_score,
            "percentage": self.overall_percentage,
            "categories": [
                {**asdict(category), "percentage": category.percentage}
                for category in self.categories
            ],
            "pages_with_seo": [_page_to_dict(page) for page in self.pages_with_seo],
            "pages_without_seo": [_page_to_dict(page) for page in self.pages_without_seo],
            "image_usage": self.image_usage.to_dict(),
            "duplicate_images": dict(self.image_usage.duplicates()),
            "pages_without_image": list(self.pages_without_image),
            "sitemap": asdict(self.sitemap),
            "robots": asdict(self.robots),
            "images": {
                "total": self.total_images,
                "without_alt": self.images_without_alt,
            },
            "recommendations": list(self.recommendations),
            "quick_fixes": list(self.quick_fixes),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def format_points(value: float) -> str:
    """Render a score without a trailing '.0'."""
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _page_to_dict(page: PageRecord) -> Dict[str, Any]:
    data = asdict(page)
    data["has_seo"] = page.has_seo
    data["url"] = page.url
    data["metadata"]["schemas"] = [schema.label for schema in page.metadata.schemas]
    return data
