"""Merges per-page records into coverage partitions and the image usage index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .models import ImageUsageIndex, PageRecord


@dataclass
class Aggregate:
    """Cross-page view consumed by the scoring engine."""

    pages_with_seo: List[PageRecord] = field(default_factory=list)
    pages_without_seo: List[PageRecord] = field(default_factory=list)
    image_usage: ImageUsageIndex = field(default_factory=ImageUsageIndex)
    pages_without_image: List[str] = field(default_factory=list)

    @property
    def all_pages(self) -> List[PageRecord]:
        return self.pages_with_seo + self.pages_without_seo

    @property
    def total_pages(self) -> int:
        return len(self.pages_with_seo) + len(self.pages_without_seo)


def aggregate(records: Iterable[PageRecord]) -> Aggregate:
    """Partition ``records`` by coverage, preserving their order."""
    result = Aggregate()
    for record in records:
        if not record.has_seo:
            result.pages_without_seo.append(record)
            continue
        result.pages_with_seo.append(record)
        image = record.metadata.image
        if image:
            result.image_usage.add(image, record.name)
        else:
            result.pages_without_image.append(record.name)
    return result


__all__ = ["Aggregate", "aggregate"]
