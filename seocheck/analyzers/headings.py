"""Heading hierarchy checks for page templates."""

from __future__ import annotations

import re

from .base import DocumentAnalyzer, template_region
from ..models import HeadingInfo, SourceDocument

_H1_RE = re.compile(r"<h1[^>]*>", re.IGNORECASE)
_HEADING_RE = re.compile(r"<h([1-6])[^>]*>", re.IGNORECASE)


class HeadingAnalyzer(DocumentAnalyzer[HeadingInfo]):
    """Counts H1 tags and flags skipped heading levels."""

    def analyze(self, document: SourceDocument) -> HeadingInfo:
        info = HeadingInfo()
        template = template_region(document.text)
        if template is None:
            return info

        info.h1_count = len(_H1_RE.findall(template))
        if info.h1_count == 0:
            info.issues.append("No H1 tag found")
        elif info.h1_count > 1:
            info.issues.append(f"Multiple H1 tags found ({info.h1_count}), should have only 1")

        last_level = 0
        hierarchy_broken = False
        for match in _HEADING_RE.finditer(template):
            level = int(match.group(1))
            info.levels.append(level)
            if last_level > 0 and level > last_level + 1:
                hierarchy_broken = True
            last_level = level

        if hierarchy_broken:
            info.issues.append("Heading hierarchy broken (skipped levels)")
        return info
