"""Tests for seocheck.orchestrator."""

from __future__ import annotations

import json

import pytest

from seocheck.config import load_config
from seocheck.orchestrator import Orchestrator
from seocheck.project import ProjectLayoutError
from seocheck.scoring import SOCIAL_SHARING
from tests._fixtures.project_builder import ProjectBuilder

INDEX_PAGE = """
<template>
  <h1>Welcome</h1>
  <img src="/img/hero.png" alt="Hero">
</template>
<script setup>
useHead(generateSEO({
  title: 'Flexible home loans for every stage of life',
  description: 'Short description',
  image: '/img/homepage.png',
  faqs: [{ question: 'Why?', answer: 'Because' }, { question: 'How?', answer: 'Online' }],
}))
</script>
"""

ABOUT_PAGE = """
<template>
  <h1>About</h1>
</template>
<script setup>
useHead(generateSEO({ title: 'About our lending team and our history', image: '/img/homepage.png' }))
</script>
"""

LEGAL_PAGE = """
<template>
  <h1>Legal</h1>
</template>
"""

DRAFT_PAGE = """
<script setup>
const seo = generateSEO({ title: 'Draft page that never reaches the head' })
</script>
"""


def _standard_project(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "app/pages/index.vue": INDEX_PAGE,
            "app/pages/about.vue": ABOUT_PAGE,
            "app/pages/legal.vue": LEGAL_PAGE,
            "app/pages/admin/index.vue": ABOUT_PAGE,
            "server/api/sitemap.ts": "export default [{ loc: '/' }, { loc: '/about' }]\n",
            "nuxt.config.ts": "modules: ['@nuxtjs/robots'],\nrobots: { allow: '/' },\n",
        }
    )


class CannedEngine:
    """Test double returning a fixed generateSEO output."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, source: str, timeout_ms: int) -> str:
        self.calls += 1
        return json.dumps(
            {
                "meta": [
                    {"name": "title", "content": "A title that is long enough to pass"},
                    {"name": "description", "content": "D" * 140},
                    {"property": "og:image", "content": "https://site.test/img/og.png"},
                ],
                "link": [{"rel": "canonical", "href": "https://site.test/"}],
                "script": [{"innerHTML": json.dumps({"@graph": [{"@type": "WebPage"}]})}],
            }
        )


def test_run_static_analysis(project_builder: ProjectBuilder) -> None:
    _standard_project(project_builder)

    report = Orchestrator().run(project_builder.path(), use_sandbox=False, workers=2)

    assert report.project_name == "site"
    assert report.pages_dir == "app/pages"
    assert report.total_pages == 3
    assert [page.name for page in report.pages_with_seo] == ["about", "index"]
    assert [page.name for page in report.pages_without_seo] == ["legal"]
    assert report.image_usage.duplicates() == [("/img/homepage.png", ["about", "index"])]
    assert report.sitemap.missing == []
    assert report.sitemap.listed == ["", "about"]
    assert report.robots.configured
    assert report.warnings == []
    assert report.errors == []
    assert report.category(SOCIAL_SHARING).score == 13

    index = next(page for page in report.pages_with_seo if page.name == "index")
    assert index.metadata.source == "static"
    assert [schema.label for schema in index.metadata.schemas] == [
        "WebPage",
        "Organization",
        "FAQPage (2 FAQs)",
    ]


def test_run_uses_sandbox_only_for_covered_pages(project_builder: ProjectBuilder) -> None:
    _standard_project(project_builder)
    project_builder.write(
        {
            "app/utils/seo.js": "export const generateSEO = (params) => {\n  return {}\n}\n",
            "app/pages/draft.vue": DRAFT_PAGE,
        }
    )
    engine = CannedEngine()

    report = Orchestrator(engine=engine).run(project_builder.path(), workers=1)

    assert engine.calls == 2
    assert {page.metadata.source for page in report.pages_with_seo} == {"dynamic"}
    draft = next(page for page in report.pages_without_seo if page.name == "draft")
    assert draft.metadata.source == "static"
    assert draft.sandbox_note is None
    # The call-site image wins over the generated og:image.
    index = next(page for page in report.pages_with_seo if page.name == "index")
    assert index.metadata.image == "/img/homepage.png"


def test_run_without_utility_falls_back(project_builder: ProjectBuilder) -> None:
    _standard_project(project_builder)

    report = Orchestrator(engine=CannedEngine()).run(project_builder.path(), workers=1)

    assert "SEO utility file not found - pages analyzed statically" in report.warnings
    assert {page.sandbox_note for page in report.pages_with_seo} == {"SEO utility file not found"}
    assert {page.metadata.source for page in report.pages_with_seo} == {"static"}


def test_run_records_unreadable_pages(project_builder: ProjectBuilder) -> None:
    _standard_project(project_builder)
    broken = project_builder.path() / "app" / "pages" / "broken.vue"
    broken.write_bytes(b"\xff\xfe\x00\x81broken")

    report = Orchestrator().run(project_builder.path(), use_sandbox=False, workers=3)

    assert report.total_pages == 3
    assert len(report.errors) == 1
    assert report.errors[0].startswith("Error reading file")


def test_run_warns_about_missing_sitemap(project_builder: ProjectBuilder) -> None:
    project_builder.write({"pages/index.vue": INDEX_PAGE})

    report = Orchestrator().run(project_builder.path(), use_sandbox=False)

    assert "Sitemap file not found - checked common locations" in report.warnings
    assert report.sitemap.missing == ["/"]
    assert not report.robots.configured
    assert "Consider adding a sitemap for better SEO" in report.recommendations


def test_run_requires_pages_directory(project_builder: ProjectBuilder) -> None:
    with pytest.raises(ProjectLayoutError):
        Orchestrator().run(project_builder.path())


def test_generated_default_image_is_not_a_page_image(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "app/utils/seo.js": "export const generateSEO = (params) => {\n  return {}\n}\n",
            "app/pages/a.vue": "useHead(generateSEO({ title: 'First page without an image' }))",
            "app/pages/b.vue": "useHead(generateSEO({ title: 'Second page without an image' }))",
        }
    )

    report = Orchestrator(engine=CannedEngine()).run(project_builder.path(), workers=1)

    assert report.image_usage.duplicates() == []
    assert len(report.image_usage) == 0
    assert report.pages_without_image == ["a", "b"]
    assert {page.metadata.og_image for page in report.pages_with_seo} == {
        "https://site.test/img/og.png"
    }


def test_run_uses_preloaded_config(project_builder: ProjectBuilder) -> None:
    _standard_project(project_builder)
    project_builder.write({".seocheck.yml": "ignore_paths: [about]\n"})
    config = load_config(project_builder.path())
    config.ignore_paths = []

    report = Orchestrator().run(project_builder.path(), config=config, use_sandbox=False)

    names = [page.name for page in report.pages_with_seo]
    assert names == ["about", "admin/index", "index"]
