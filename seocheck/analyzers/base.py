"""Base classes for per-document analyzers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from ..models import SourceDocument

_TEMPLATE_RE = re.compile(r"<template[^>]*>(.*?)</template>", re.DOTALL)

ResultT = TypeVar("ResultT")


class DocumentAnalyzer(ABC, Generic[ResultT]):
    """Contract for analyzers that inspect a single page source."""

    @abstractmethod
    def analyze(self, document: SourceDocument) -> ResultT:
        """Return the analyzer's findings for ``document``."""


def template_region(text: str) -> Optional[str]:
    """Return the markup of the first ``<template>`` block, if any.

    The match is non-greedy, so a nested ``<template>`` ends the region early.
    """
    match = _TEMPLATE_RE.search(text)
    return match.group(1) if match else None
