"""Tests for generateSEO call-site parameter extraction."""

from __future__ import annotations

from seocheck.analyzers import ParameterAnalyzer, extract_parameters
from tests._fixtures.project_builder import document


def test_extract_parameters_returns_none_without_call() -> None:
    assert extract_parameters("<script setup>useSeoMeta({ title: 'x' })</script>") is None


def test_extract_parameters_reads_scalars_with_any_quote() -> None:
    params = extract_parameters(
        """
        const seo = generateSEO({
          title: `Home Loans`,
          description: "Compare our rates",
          image: '/img/home.png',
        })
        """
    )

    assert params is not None
    assert params.title == "Home Loans"
    assert params.description == "Compare our rates"
    assert params.image == "/img/home.png"


def test_extract_parameters_counts_collection_objects() -> None:
    params = extract_parameters(
        """
        generateSEO({
          title: 'Products',
          products: [
            { name: 'A' }, { name: 'B' }, { name: 'C' }, { name: 'D' }, { name: 'E' },
          ],
          faqs: [faqItems],
          services: [],
        })
        """
    )

    assert params is not None
    assert params.count("products") == 5
    assert params.count("faqs") == 1
    assert params.count("services") == 0
    assert "services" not in params.collections


def test_extract_parameters_detects_non_empty_flags_only() -> None:
    params = extract_parameters(
        """
        generateSEO({
          title: 'Contact',
          contactPage: { telephone: '123' },
          grant: {},
        })
        """
    )

    assert params is not None
    assert params.has_flag("contactPage")
    assert not params.has_flag("grant")


def test_parameter_analyzer_wraps_extraction() -> None:
    doc = document("useHead(generateSEO({ title: 'About us' }))", name="about")

    params = ParameterAnalyzer().analyze(doc)

    assert params is not None
    assert params.title == "About us"


def test_to_arguments_expands_counts_into_placeholders() -> None:
    params = extract_parameters("generateSEO({ faqs: [{ q: 1 }, { q: 2 }], grant: { a: 1 } })")

    assert params is not None
    arguments = params.to_arguments()
    assert len(arguments["faqs"]) == 2
    assert arguments["grant"] == {}
    assert "title" not in arguments
