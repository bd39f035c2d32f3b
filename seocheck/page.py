"""Per-page analysis pipeline: parameters, sandbox, metadata and template checks."""

from __future__ import annotations

from typing import Optional

from .analyzers import HeadingAnalyzer, ImageAnalyzer, ParameterAnalyzer
from .models import PageRecord, ParameterSet, SourceDocument
from .normalizer import normalize_metadata
from .sandbox import SandboxEvaluator

GENERATE_SEO_CALL = "generateSEO("
SEO_META_CALL = "useSeoMeta("
HEAD_CALL = "useHead("


class PageAnalyzer:
    """Turns a single :class:`SourceDocument` into a :class:`PageRecord`.

    Holds no per-page state, so one instance can serve concurrent workers.
    The sandbox only runs for pages that both declare metadata and inject it
    into the head; everything else is judged from static text.
    """

    def __init__(
        self,
        evaluator: SandboxEvaluator | None = None,
        *,
        parameters: ParameterAnalyzer | None = None,
        headings: HeadingAnalyzer | None = None,
        images: ImageAnalyzer | None = None,
    ) -> None:
        self.evaluator = evaluator
        self.parameters = parameters or ParameterAnalyzer()
        self.headings = headings or HeadingAnalyzer()
        self.images = images or ImageAnalyzer()

    def analyze(self, document: SourceDocument) -> PageRecord:
        text = document.text
        uses_generate_seo = GENERATE_SEO_CALL in text
        uses_seo_meta = SEO_META_CALL in text
        uses_head = HEAD_CALL in text
        has_seo = (uses_generate_seo or uses_seo_meta) and uses_head

        params: Optional[ParameterSet] = None
        output = None
        note: Optional[str] = None
        if uses_generate_seo:
            params = self.parameters.analyze(document)
            if has_seo and params is not None and self.evaluator is not None:
                result = self.evaluator.evaluate(params)
                output = result.output
                note = result.note

        metadata = normalize_metadata(
            text,
            params=params,
            output=output,
            uses_declaration=uses_generate_seo,
        )

        return PageRecord(
            path=document.path,
            name=document.name,
            uses_generate_seo=uses_generate_seo,
            uses_seo_meta=uses_seo_meta,
            uses_head=uses_head,
            metadata=metadata,
            headings=self.headings.analyze(document),
            images=self.images.analyze(document),
            params=params,
            sandbox_note=note,
        )


__all__ = ["PageAnalyzer"]
