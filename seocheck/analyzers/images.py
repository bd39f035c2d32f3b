"""Image alt-text and lazy-loading checks for page templates."""

from __future__ import annotations

import re
from typing import List

from .base import DocumentAnalyzer, template_region
from ..models import ImageInfo, SourceDocument, round_half_up

_IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
_NUXT_IMG_RE = re.compile(r"<NuxtImg[^>]*>", re.IGNORECASE)


class ImageAnalyzer(DocumentAnalyzer[ImageInfo]):
    """Measures alt-text coverage and suggests lazy loading."""

    def analyze(self, document: SourceDocument) -> ImageInfo:
        info = ImageInfo()
        template = template_region(document.text)
        if template is None:
            return info

        tags: List[str] = _IMG_RE.findall(template) + _NUXT_IMG_RE.findall(template)
        info.total = len(tags)
        for tag in tags:
            if _has_alt(tag):
                info.with_alt += 1
            else:
                info.without_alt += 1
            if 'loading="lazy"' in tag or "lazy=" in tag:
                info.lazy += 1

        if info.without_alt > 0:
            coverage = round_half_up(info.with_alt / info.total * 100)
            info.issues.append(
                f"{info.without_alt} images missing alt text ({coverage}% coverage)"
            )

        if info.total > 2 and info.lazy < info.total - 2:
            info.issues.append("Consider implementing lazy loading for below-the-fold images")
        return info


def _has_alt(tag: str) -> bool:
    return "alt=" in tag and 'alt=""' not in tag and "alt=''" not in tag
