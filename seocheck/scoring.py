"""Weighted five-category SEO score with issue attribution and recommendations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .aggregator import Aggregate
from .models import (
    CategoryScore,
    RobotsVerdict,
    SchemaType,
    SitemapCoverage,
    format_points,
    round_half_up,
)

CATEGORY_MAX = 20

META_TAGS = "meta_tags"
TECHNICAL_SEO = "technical_seo"
STRUCTURED_DATA = "structured_data"
IMAGES_MEDIA = "images_media"
SOCIAL_SHARING = "social_sharing"

CATEGORY_NAMES: Dict[str, str] = {
    META_TAGS: "Meta Tags",
    TECHNICAL_SEO: "Technical SEO",
    STRUCTURED_DATA: "Structured Data",
    IMAGES_MEDIA: "Images & Media",
    SOCIAL_SHARING: "Social Sharing",
}

RICH_SCHEMA_MARKERS: tuple[str, ...] = ("Product", "FAQ", "LocalBusiness")
SOCIAL_TAG_THRESHOLD = 4
SITEMAP_PENALTY_CAP = 3


@dataclass
class ScoreCard:
    """Scores plus the derived advice lists."""

    categories: List[CategoryScore]
    sitemap: SitemapCoverage
    total_images: int = 0
    images_without_alt: int = 0
    recommendations: List[str] = field(default_factory=list)
    quick_fixes: List[str] = field(default_factory=list)

    def category(self, key: str) -> CategoryScore:
        for category in self.categories:
            if category.key == key:
                return category
        raise KeyError(key)


def sitemap_coverage(
    aggregate: Aggregate, listed: Optional[List[str]], *, source: Optional[str] = None
) -> SitemapCoverage:
    """Return covered pages whose URL is not declared in the sitemap.

    With no sitemap source at all every covered page counts as missing.
    """
    urls = list(listed or [])
    declared = {url.strip("/") for url in urls}
    missing = [
        page.url for page in aggregate.pages_with_seo if page.url.strip("/") not in declared
    ]
    return SitemapCoverage(source=source, listed=urls, missing=missing)


class ScoringEngine:
    """Computes category scores from an :class:`Aggregate` and project-level inputs."""

    def score(
        self,
        aggregate: Aggregate,
        *,
        sitemap: SitemapCoverage,
        robots: Optional[RobotsVerdict] = None,
    ) -> ScoreCard:
        categories = {
            key: CategoryScore(key=key, name=name, max_score=CATEGORY_MAX)
            for key, name in CATEGORY_NAMES.items()
        }
        card = ScoreCard(categories=list(categories.values()), sitemap=sitemap)
        if aggregate.total_pages == 0:
            return card

        self._meta_tags(aggregate, categories[META_TAGS])
        self._technical(aggregate, categories[TECHNICAL_SEO], sitemap, robots)
        self._structured_data(aggregate, categories[STRUCTURED_DATA])
        card.total_images, card.images_without_alt = self._images(
            aggregate, categories[IMAGES_MEDIA]
        )
        self._social(aggregate, categories[SOCIAL_SHARING])

        card.recommendations = self._recommendations(aggregate, sitemap, robots)
        card.quick_fixes = self._quick_fixes(aggregate, card)
        return card

    # ------------------------------------------------------------------
    # Categories

    def _meta_tags(self, aggregate: Aggregate, category: CategoryScore) -> None:
        score = float(CATEGORY_MAX)
        for page in aggregate.pages_with_seo:
            issues = page.metadata.issues
            score -= len(issues) * 0.5
            category.issues.extend(f"{page.name}: {issue}" for issue in issues)
        for page in aggregate.pages_without_seo:
            score -= 2
            category.issues.append(f"{page.name}: No SEO implementation")
        category.score = _clamp(score)

    def _technical(
        self,
        aggregate: Aggregate,
        category: CategoryScore,
        sitemap: SitemapCoverage,
        robots: Optional[RobotsVerdict],
    ) -> None:
        score = float(CATEGORY_MAX)
        score -= sum(1 for page in aggregate.pages_with_seo if not page.metadata.canonical)

        for page in aggregate.pages_with_seo:
            issues = page.headings.issues
            score -= len(issues) * 0.5
            category.issues.extend(f"{page.name}: {issue}" for issue in issues)

        if robots is None or not robots.configured:
            score -= 3
            category.issues.append("No robots configuration")

        if sitemap.missing:
            score -= min(SITEMAP_PENALTY_CAP, len(sitemap.missing) * 0.5)
            category.issues.append(f"{len(sitemap.missing)} pages missing from sitemap")
        category.score = _clamp(score)

    def _structured_data(self, aggregate: Aggregate, category: CategoryScore) -> None:
        pages = aggregate.all_pages
        with_schemas = [page for page in pages if page.metadata.schemas]
        score = round_half_up(len(with_schemas) / len(pages) * CATEGORY_MAX)
        if any(_has_rich_schema(page.metadata.schemas) for page in pages):
            score = min(CATEGORY_MAX, score + 2)
        for page in aggregate.pages_with_seo:
            if not page.metadata.schemas:
                category.issues.append(f"{page.name}: No structured data detected")
        category.score = _clamp(score)

    def _images(self, aggregate: Aggregate, category: CategoryScore) -> tuple[int, int]:
        total = 0
        without_alt = 0
        for page in aggregate.pages_with_seo:
            total += page.images.total
            without_alt += page.images.without_alt
            category.issues.extend(f"{page.name}: {issue}" for issue in page.images.issues)

        score: float = CATEGORY_MAX
        if total > 0:
            score = round_half_up((total - without_alt) / total * CATEGORY_MAX)
        category.score = _clamp(score)
        return total, without_alt

    def _social(self, aggregate: Aggregate, category: CategoryScore) -> None:
        pages_with_og = 0
        pages_with_twitter = 0
        for page in aggregate.pages_with_seo:
            metadata = page.metadata
            if sum(1 for present in metadata.og_tags.values() if present) >= SOCIAL_TAG_THRESHOLD:
                pages_with_og += 1
            if (
                sum(1 for present in metadata.twitter_tags.values() if present)
                >= SOCIAL_TAG_THRESHOLD
            ):
                pages_with_twitter += 1

            social_issues = [
                issue
                for issue in metadata.issues
                if "Open Graph" in issue or "Twitter" in issue
            ]
            if social_issues:
                category.issues.append(f"{page.name}: {', '.join(social_issues)}")

        total = aggregate.total_pages
        og_coverage = pages_with_og / total
        twitter_coverage = pages_with_twitter / total
        category.score = _clamp(
            round_half_up((og_coverage + twitter_coverage) / 2 * CATEGORY_MAX)
        )

    # ------------------------------------------------------------------
    # Advice

    def _recommendations(
        self,
        aggregate: Aggregate,
        sitemap: SitemapCoverage,
        robots: Optional[RobotsVerdict],
    ) -> List[str]:
        covered = aggregate.pages_with_seo
        recommendations: List[str] = []

        if aggregate.pages_without_seo:
            recommendations.append(
                "Add generateSEO() or useSeoMeta() to pages missing SEO implementation"
            )

        if sitemap.source and sitemap.missing:
            recommendations.append("Add missing pages to sitemap configuration")

        schema_counts: Dict[str, int] = {}
        for page in covered:
            for schema in page.metadata.schemas:
                schema_counts[schema.name] = schema_counts.get(schema.name, 0) + 1

        if any("product" in page.path for page in covered) and not schema_counts.get("Product"):
            recommendations.append("Consider adding Product schema for product-related pages")

        if not schema_counts.get("BreadcrumbList") and len(covered) > 3:
            recommendations.append(
                "Consider adding BreadcrumbList schema for better navigation context in search results"
            )

        if not schema_counts.get("FAQPage"):
            recommendations.append(
                "Consider adding FAQ schema to relevant pages for rich snippets"
            )

        if any("contact" in page.path for page in covered) and not schema_counts.get(
            "LocalBusiness"
        ):
            recommendations.append(
                "Consider adding LocalBusiness schema to contact pages with branch information"
            )

        if covered:
            per_page = sum(schema_counts.values()) / len(covered)
            if per_page < 3:
                recommendations.append(
                    f"Average {per_page:.1f} schemas per page - consider adding more structured data"
                )

        if not sitemap.source:
            recommendations.append("Consider adding a sitemap for better SEO")

        if robots is None or not robots.configured:
            recommendations.append("Add robots configuration (@nuxtjs/robots or robots.txt)")

        if not recommendations:
            recommendations.append(
                "SEO implementation looks good! Consider adding more structured data types."
            )
        return recommendations

    def _quick_fixes(self, aggregate: Aggregate, card: ScoreCard) -> List[str]:
        fixes: List[str] = []

        social = card.category(SOCIAL_SHARING)
        if social.score < 10:
            fixes.append(
                f"Add Open Graph tags to all pages (impact: +{format_points(CATEGORY_MAX - social.score)} points)"
            )

        if card.total_images > 0 and card.images_without_alt > 0:
            gain = round_half_up(card.images_without_alt / card.total_images * CATEGORY_MAX)
            fixes.append(
                f"Add alt text to {card.images_without_alt} images (impact: +{gain} points)"
            )

        meta_issues = card.category(META_TAGS).issues
        if any("too short" in issue or "too long" in issue for issue in meta_issues):
            fixes.append("Optimize title and description lengths (impact: +2-5 points)")

        missing = len(aggregate.pages_without_seo)
        if missing:
            fixes.append(f"Add SEO to {missing} pages (impact: +{missing * 2} points)")

        if not fixes:
            fixes.append(
                "SEO implementation is well optimized! Consider adding more structured data types."
            )
        return fixes


def _has_rich_schema(schemas: Iterable[SchemaType]) -> bool:
    return any(marker in schema.name for schema in schemas for marker in RICH_SCHEMA_MARKERS)


def _clamp(value: float) -> float:
    bounded = max(0.0, min(float(CATEGORY_MAX), float(value)))
    return int(bounded) if bounded.is_integer() else bounded


__all__ = [
    "CATEGORY_MAX",
    "CATEGORY_NAMES",
    "IMAGES_MEDIA",
    "META_TAGS",
    "STRUCTURED_DATA",
    "SOCIAL_SHARING",
    "TECHNICAL_SEO",
    "ScoreCard",
    "ScoringEngine",
    "sitemap_coverage",
]
