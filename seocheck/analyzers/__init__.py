"""Per-document analyzers: call-site parameters, headings and images."""

from __future__ import annotations

from .base import DocumentAnalyzer, template_region
from .headings import HeadingAnalyzer
from .images import ImageAnalyzer
from .params import ENTRY_POINT, ParameterAnalyzer, extract_parameters

__all__ = [
    "DocumentAnalyzer",
    "ENTRY_POINT",
    "HeadingAnalyzer",
    "ImageAnalyzer",
    "ParameterAnalyzer",
    "extract_parameters",
    "template_region",
]
