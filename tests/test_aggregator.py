"""Tests for seocheck.aggregator."""

from __future__ import annotations

from seocheck.aggregator import aggregate
from tests._fixtures.project_builder import make_page


def test_aggregate_partitions_and_indexes_images() -> None:
    records = [
        make_page("index", image="/img/homepage.png"),
        make_page("about", image="/img/homepage.png"),
        make_page("contact", image="/img/contact.png"),
        make_page("faq"),
        make_page("legal", covered=False, image="/img/homepage.png"),
    ]

    result = aggregate(records)

    assert [page.name for page in result.pages_with_seo] == ["index", "about", "contact", "faq"]
    assert [page.name for page in result.pages_without_seo] == ["legal"]
    assert result.pages_without_image == ["faq"]
    assert result.image_usage.pages_for("/img/homepage.png") == ["index", "about"]
    assert result.image_usage.duplicates() == [("/img/homepage.png", ["index", "about"])]
    assert not result.image_usage.is_duplicate("/img/contact.png")
    assert result.total_pages == 5


def test_uncovered_pages_never_enter_image_index() -> None:
    result = aggregate([make_page("draft", covered=False, image="/img/draft.png")])

    assert "/img/draft.png" not in result.image_usage
    assert len(result.image_usage) == 0
    assert result.pages_without_image == []


def test_duplicates_sorted_by_usage_count() -> None:
    records = [
        make_page("a", image="/one.png"),
        make_page("b", image="/one.png"),
        make_page("c", image="/two.png"),
        make_page("d", image="/two.png"),
        make_page("e", image="/two.png"),
    ]

    duplicates = aggregate(records).image_usage.duplicates()

    assert [image for image, _ in duplicates] == ["/two.png", "/one.png"]
