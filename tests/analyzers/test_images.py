"""Tests for image alt-text and lazy-loading checks."""

from __future__ import annotations

from seocheck.analyzers import ImageAnalyzer
from tests._fixtures.project_builder import document


def test_alt_coverage_counts_empty_alt_as_missing() -> None:
    info = ImageAnalyzer().analyze(
        document(
            """
            <template>
              <img src="/a.png" alt="A photo">
              <img src="/b.png" alt="">
              <NuxtImg src="/c.png" />
            </template>
            """
        )
    )

    assert info.total == 3
    assert info.with_alt == 1
    assert info.without_alt == 2
    assert "2 images missing alt text (33% coverage)" in info.issues


def test_lazy_loading_suggested_when_most_images_eager() -> None:
    tags = "".join(f'<img src="/{index}.png" alt="x">' for index in range(4))
    info = ImageAnalyzer().analyze(document(f"<template>{tags}</template>"))

    assert info.lazy == 0
    assert info.issues == ["Consider implementing lazy loading for below-the-fold images"]


def test_lazy_images_satisfy_suggestion() -> None:
    info = ImageAnalyzer().analyze(
        document(
            """
            <template>
              <img src="/hero.png" alt="hero">
              <img src="/1.png" alt="one" loading="lazy">
              <NuxtImg src="/2.png" alt="two" lazy="true" />
            </template>
            """
        )
    )

    assert info.lazy == 2
    assert info.issues == []


def test_page_without_images() -> None:
    info = ImageAnalyzer().analyze(document("<template><p>Text</p></template>"))

    assert info.total == 0
    assert info.issues == []
