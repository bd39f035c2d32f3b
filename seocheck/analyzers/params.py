"""Best-effort extraction of ``generateSEO({...})`` arguments from page sources.

There is no grammar here: the call site is located with a non-greedy pattern
that stops at the first ``}`` followed by ``)``, and each known field is picked
out of that span with its own pattern. Nested objects directly before the
closing parenthesis can cut the span short; callers treat whatever comes back
as a partial view.
"""

from __future__ import annotations

import re
from typing import Optional

from .base import DocumentAnalyzer
from ..models import COLLECTION_FIELDS, FLAG_FIELDS, ParameterSet, SourceDocument

ENTRY_POINT = "generateSEO"

_CALL_RE = re.compile(ENTRY_POINT + r"\s*\(\s*\{(.*?)\}\s*\)", re.DOTALL)


def scalar_pattern(name: str) -> re.Pattern[str]:
    """Pattern for ``name: '...'`` with single, double or back quotes."""
    return re.compile(name + r":\s*[`\"']([^`\"']*)[`\"']")


_SCALAR_PATTERNS = {name: scalar_pattern(name) for name in ("title", "description", "image")}
_COLLECTION_PATTERNS = {
    name: re.compile(name + r":\s*\[(.*?)\]", re.DOTALL) for name in COLLECTION_FIELDS
}
_FLAG_PATTERNS = {name: re.compile(name + r":\s*\{(.*?)\}", re.DOTALL) for name in FLAG_FIELDS}


def extract_parameters(text: str) -> Optional[ParameterSet]:
    """Return the arguments of the first ``generateSEO`` call, or None when absent."""
    call = _CALL_RE.search(text)
    if call is None:
        return None

    block = call.group(1)
    params = ParameterSet()

    for name, pattern in _SCALAR_PATTERNS.items():
        match = pattern.search(block)
        if match:
            setattr(params, name, match.group(1))

    for name, pattern in _COLLECTION_PATTERNS.items():
        match = pattern.search(block)
        if not match:
            continue
        content = match.group(1).strip()
        if content:
            # Each object literal opens with a brace; plain values still count once.
            params.collections[name] = content.count("{") or 1

    for name, pattern in _FLAG_PATTERNS.items():
        match = pattern.search(block)
        if match and match.group(1).strip():
            params.flags.append(name)

    return params


class ParameterAnalyzer(DocumentAnalyzer[Optional[ParameterSet]]):
    """Document analyzer wrapper around :func:`extract_parameters`."""

    def analyze(self, document: SourceDocument) -> Optional[ParameterSet]:
        return extract_parameters(document.text)


__all__ = ["ENTRY_POINT", "ParameterAnalyzer", "extract_parameters", "scalar_pattern"]
