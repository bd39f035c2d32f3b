"""Tests for seocheck.scoring."""

from __future__ import annotations

import pytest

from seocheck.aggregator import aggregate
from seocheck.models import RobotsVerdict, SitemapCoverage
from seocheck.scoring import (
    IMAGES_MEDIA,
    META_TAGS,
    SOCIAL_SHARING,
    STRUCTURED_DATA,
    TECHNICAL_SEO,
    ScoringEngine,
    sitemap_coverage,
)
from tests._fixtures.project_builder import make_page

FULL_OG = ("title", "description", "image", "url")
FULL_TWITTER = ("card", "title", "description", "image")
CONFIGURED = RobotsVerdict(configured=True, source="@nuxtjs/robots", message="ok")


def _mixed_project():
    return aggregate(
        [
            make_page(
                "index",
                image="/img/homepage.png",
                schemas=("WebPage", "Organization", "FAQPage"),
                og_tags=FULL_OG,
                twitter_tags=FULL_TWITTER,
                images_total=4,
                images_without_alt=1,
            ),
            make_page(
                "about",
                image="/img/homepage.png",
                schemas=("WebPage",),
                issues=("Title too short (20 chars, recommended: 50-60)",),
                canonical=False,
                og_tags=FULL_OG,
                twitter_tags=FULL_TWITTER,
                heading_issues=("No H1 tag found",),
            ),
            make_page("legal", covered=False),
        ]
    )


def test_mixed_project_scores() -> None:
    merged = _mixed_project()
    coverage = sitemap_coverage(merged, ["/about"], source="server/api/sitemap.ts")

    card = ScoringEngine().score(merged, sitemap=coverage, robots=CONFIGURED)

    assert coverage.missing == ["/"]
    assert card.category(META_TAGS).score == 17.5
    assert card.category(META_TAGS).issues == [
        "about: Title too short (20 chars, recommended: 50-60)",
        "legal: No SEO implementation",
    ]
    assert card.category(TECHNICAL_SEO).score == 18
    assert card.category(TECHNICAL_SEO).issues == [
        "about: No H1 tag found",
        "1 pages missing from sitemap",
    ]
    assert card.category(STRUCTURED_DATA).score == 15
    assert card.category(IMAGES_MEDIA).score == 15
    assert card.category(SOCIAL_SHARING).score == 13
    assert (card.total_images, card.images_without_alt) == (4, 1)


def test_mixed_project_advice() -> None:
    merged = _mixed_project()
    coverage = sitemap_coverage(merged, ["about"], source="server/api/sitemap.ts")

    card = ScoringEngine().score(merged, sitemap=coverage, robots=CONFIGURED)

    assert card.recommendations == [
        "Add generateSEO() or useSeoMeta() to pages missing SEO implementation",
        "Add missing pages to sitemap configuration",
        "Average 2.0 schemas per page - consider adding more structured data",
    ]
    assert card.quick_fixes == [
        "Add alt text to 1 images (impact: +5 points)",
        "Optimize title and description lengths (impact: +2-5 points)",
        "Add SEO to 1 pages (impact: +2 points)",
    ]


@pytest.mark.parametrize("count", [1, 3, 12])
def test_zero_coverage(count: int) -> None:
    merged = aggregate([make_page(f"page-{index}", covered=False) for index in range(count)])

    card = ScoringEngine().score(merged, sitemap=SitemapCoverage(), robots=None)

    assert card.category(META_TAGS).score == max(0, 20 - 2 * count)
    assert card.category(STRUCTURED_DATA).score == 0
    assert card.category(SOCIAL_SHARING).score == 0
    assert card.category(IMAGES_MEDIA).score == 20
    assert card.category(TECHNICAL_SEO).score == 17
    assert f"Add SEO to {count} pages (impact: +{count * 2} points)" in card.quick_fixes
    assert "Add robots configuration (@nuxtjs/robots or robots.txt)" in card.recommendations


def test_empty_project_scores_zero_without_advice() -> None:
    card = ScoringEngine().score(aggregate([]), sitemap=SitemapCoverage(), robots=None)

    assert [category.score for category in card.categories] == [0, 0, 0, 0, 0]
    assert card.recommendations == []
    assert card.quick_fixes == []


def test_scores_stay_within_bounds() -> None:
    noisy = [
        make_page(
            f"noisy-{index}",
            issues=[f"issue {n}" for n in range(30)],
            canonical=False,
            heading_issues=("No H1 tag found", "Heading hierarchy broken (skipped levels)"),
            images_total=5,
            images_without_alt=5,
        )
        for index in range(10)
    ]
    merged = aggregate(noisy)
    coverage = sitemap_coverage(merged, [], source=None)

    card = ScoringEngine().score(merged, sitemap=coverage, robots=None)

    assert sum(category.max_score for category in card.categories) == 100
    for category in card.categories:
        assert 0 <= category.score <= category.max_score
    assert card.category(META_TAGS).score == 0
    assert card.category(TECHNICAL_SEO).score == 0
    assert card.category(IMAGES_MEDIA).score == 0


def test_missing_sitemap_counts_every_covered_page() -> None:
    merged = aggregate([make_page("index"), make_page("blog/index"), make_page("contact")])

    coverage = sitemap_coverage(merged, None)

    assert coverage.missing == ["/", "/blog", "/contact"]


def test_structured_data_flags_covered_pages_without_schemas() -> None:
    merged = aggregate(
        [make_page("products", schemas=("Product",)), make_page("terms"), make_page("careers")]
    )

    card = ScoringEngine().score(merged, sitemap=SitemapCoverage(), robots=CONFIGURED)

    structured = card.category(STRUCTURED_DATA)
    # 1/3 of 20 rounds to 7, plus the rich-schema bonus.
    assert structured.score == 9
    assert structured.issues == [
        "terms: No structured data detected",
        "careers: No structured data detected",
    ]
