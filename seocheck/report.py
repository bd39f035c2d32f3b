"""Plain-text rendering of an :class:`AnalysisReport` via Jinja templates."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader

from .models import AnalysisReport, PageRecord, format_points

CRITICAL_PER_CATEGORY = 3
CRITICAL_LIMIT = 5
QUICK_FIX_LIMIT = 3
COLLECTION_LABELS: tuple[tuple[str, str], ...] = (
    ("faqs", "FAQ(s)"),
    ("products", "Product(s)"),
    ("services", "Service(s)"),
    ("branches", "Branch(es)"),
    ("news", "News Article(s)"),
)


@dataclass
class SchemaSummary:
    """How many covered pages carry a given schema type."""

    name: str
    count: int = 0
    pages: List[str] = field(default_factory=list)


class ReportRenderer:
    """Formats reports for the terminal; owns every presentation decision."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = []
        if templates_dir is not None:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, report: AnalysisReport) -> str:
        template = self._env.get_template("report.txt.j2")
        return template.render(
            report=report,
            critical_issues=critical_issues(report),
            pages=[self._page_view(report, page) for page in report.pages_with_seo],
            schema_summary=schema_summary(report),
            schema_instances=sum(len(page.metadata.schemas) for page in report.pages_with_seo),
            duplicates=report.image_usage.duplicates(),
            quick_fixes=report.quick_fixes[:QUICK_FIX_LIMIT],
            assessment=assessment(report.overall_percentage),
            fmt=format_points,
        )

    def render_json(self, report: AnalysisReport) -> str:
        return json.dumps(report.to_dict(), indent=2, sort_keys=True)

    def _page_view(self, report: AnalysisReport, page: PageRecord) -> Dict[str, object]:
        metadata = page.metadata
        description = metadata.description
        if description and len(description) > 60:
            description = description[:60] + "..."
        other: List[str] = []
        if page.params is not None:
            for name, label in COLLECTION_LABELS:
                count = page.params.count(name)
                if count:
                    other.append(f"{count} {label}")
        return {
            "path": page.path,
            "schemas": ", ".join(schema.label for schema in metadata.schemas),
            "title": metadata.title,
            "title_length": metadata.title_length,
            "title_ok": metadata.title_band == "optimal",
            "description": description,
            "description_length": metadata.description_length,
            "description_ok": metadata.description_band == "optimal",
            "image": metadata.image,
            "image_duplicate": report.image_usage.is_duplicate(metadata.image),
            "other": " | ".join(other),
            "note": page.sandbox_note,
        }


def critical_issues(report: AnalysisReport) -> List[str]:
    """Top issues from categories scoring below 60% of their maximum."""
    issues: List[str] = []
    for category in report.categories:
        if category.issues and category.score < category.max_score * 0.6:
            issues.extend(category.issues[:CRITICAL_PER_CATEGORY])
    return issues[:CRITICAL_LIMIT]


def schema_summary(report: AnalysisReport) -> List[SchemaSummary]:
    """Schema types across covered pages, most common first."""
    summary: Dict[str, SchemaSummary] = {}
    for page in report.pages_with_seo:
        for schema in page.metadata.schemas:
            entry = summary.setdefault(schema.name, SchemaSummary(schema.name))
            entry.count += 1
            entry.pages.append(page.path)
    return sorted(summary.values(), key=lambda entry: entry.count, reverse=True)


def assessment(percentage: int) -> str:
    if percentage >= 90:
        return "Excellent!"
    if percentage >= 70:
        return "Good"
    if percentage >= 50:
        return "Needs Improvement"
    return "Poor"


__all__ = ["ReportRenderer", "assessment", "critical_issues", "schema_summary"]
