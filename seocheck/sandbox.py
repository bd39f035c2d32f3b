"""Dynamic evaluation of the project's ``generateSEO`` utility.

The function body is cut out of the utility file with a pattern, wrapped
together with stub schema generators and mocked Nuxt composables, and run in a
fresh V8 isolate that has no file system, network or process access. Anything
that goes wrong yields an unavailable :class:`SandboxResult` so the caller can
fall back to static analysis.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from py_mini_racer import MiniRacer

from .analyzers.params import ENTRY_POINT
from .logging import get_logger
from .models import ParameterSet, SandboxResult

DEFAULT_UTIL_CANDIDATES: tuple[str, ...] = (
    "app/utils/seo.js",
    "utils/seo.js",
    "app/utils/seo.ts",
    "utils/seo.ts",
)

DEFAULT_TIMEOUT_MS = 2000
DEFAULT_ORIGIN = "https://example.com"
MOCK_PATHNAME = "/test-page"

_FUNCTION_RE = re.compile(
    r"(?:export\s+(?:default\s+)?)?(?:const|function)\s+"
    + ENTRY_POINT
    + r"\s*=?\s*\([^)]*\)\s*(?:=>)?\s*\{.*?(?=\n(?:export|const|let|var|function|async)\b|\Z)",
    re.DOTALL,
)
_EXPORT_PREFIX_RE = re.compile(r"^export\s+(?:default\s+)?")

STUB_HELPERS = """
const generateFAQSchema = (faqs) => {
  if (!faqs || !faqs.length) return [];
  return [{
    "@type": "FAQPage",
    mainEntity: faqs.map((faq) => ({
      "@type": "Question",
      name: faq.question,
      acceptedAnswer: { "@type": "Answer", text: faq.answer }
    }))
  }];
};
const generateBranchSchema = (branches) => {
  if (!branches || !branches.length) return [];
  return branches.map((branch) => ({ "@type": "LocalBusiness", name: branch.name }));
};
const generateServiceSchema = (services) => {
  if (!services || !services.length) return [];
  return services.map((service) => ({ "@type": "Service", name: service.name }));
};
const generateProductSchema = (products) => {
  if (!products || !products.length) return [];
  return products.map((product) => ({ "@type": "Product", name: product.name }));
};
const generateNewsArticleSchema = (news) => {
  if (!news || !news.length) return [];
  return news.map((article) => ({ "@type": "NewsArticle", headline: article.name }));
};
const generateGrantSchema = (grant) => (grant ? { "@type": "Grant" } : null);
const generateContactPageSchema = (contactPage) => (contactPage ? { "@type": "ContactPage" } : null);
"""

# Runs JavaScript source with a timeout in milliseconds and returns the
# script's completion value.
Engine = Callable[[str, int], Any]


def run_in_isolate(source: str, timeout_ms: int) -> Any:
    """Evaluate ``source`` in a new V8 isolate that is closed afterwards."""
    context = MiniRacer()
    try:
        return context.eval(source, timeout=timeout_ms)
    finally:
        context.close()


def extract_function(source: str) -> Optional[str]:
    """Return the ``generateSEO`` definition from a utility file, without ``export``."""
    match = _FUNCTION_RE.search(source)
    if match is None:
        return None
    return _EXPORT_PREFIX_RE.sub("", match.group(0).rstrip())


def build_unit(function_source: str, arguments: dict[str, Any], *, origin: str) -> str:
    """Assemble the script evaluated inside the isolate."""
    url = {
        "origin": origin,
        "pathname": MOCK_PATHNAME,
        "href": f"{origin}{MOCK_PATHNAME}",
    }
    runtime_config = {"public": {"siteUrl": origin}}
    return "\n".join(
        [
            "(function () {",
            "const console = { log() {}, info() {}, warn() {}, error() {}, debug() {} };",
            f"const useRequestURL = () => ({json.dumps(url)});",
            f"const useRuntimeConfig = () => ({json.dumps(runtime_config)});",
            STUB_HELPERS,
            function_source,
            f"const params = {json.dumps(arguments)};",
            f"return JSON.stringify({ENTRY_POINT}(params));",
            "})()",
        ]
    )


class SandboxEvaluator:
    """Runs ``generateSEO`` with extracted parameters to observe its real output."""

    def __init__(
        self,
        project_root: Path,
        *,
        util_file: Path | None = None,
        candidates: Sequence[str] = DEFAULT_UTIL_CANDIDATES,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        origin: str = DEFAULT_ORIGIN,
        engine: Engine | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.util_file = util_file
        self.candidates = tuple(candidates)
        self.timeout_ms = timeout_ms
        self.origin = origin.rstrip("/")
        self._engine = engine or run_in_isolate
        self.logger = get_logger("sandbox")

    def locate_utility(self) -> Optional[Path]:
        """Return the first existing utility file, preferring an explicit path."""
        if self.util_file is not None:
            return self.util_file if self.util_file.is_file() else None
        for candidate in self.candidates:
            path = self.project_root / candidate
            if path.is_file():
                return path
        return None

    def evaluate(self, params: ParameterSet) -> SandboxResult:
        """Return the function's output, or an unavailable result with a note."""
        util_path = self.locate_utility()
        if util_path is None:
            return SandboxResult(note="SEO utility file not found")

        try:
            source = util_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return self._failed(f"unable to read {util_path.name}: {exc}")

        function_source = extract_function(source)
        if function_source is None:
            return SandboxResult(note=f"{ENTRY_POINT} definition not found in {util_path.name}")

        try:
            unit = build_unit(function_source, params.to_arguments(), origin=self.origin)
            raw = self._engine(unit, self.timeout_ms)
            output = _decode(raw)
        except Exception as exc:
            return self._failed(str(exc) or exc.__class__.__name__)
        return SandboxResult(output=output)

    def _failed(self, reason: str) -> SandboxResult:
        note = f"Could not dynamically evaluate {ENTRY_POINT}: {reason}"
        self.logger.debug(note)
        return SandboxResult(note=note)


def _decode(raw: Any) -> dict[str, Any]:
    if raw is None:
        raise ValueError(f"{ENTRY_POINT} returned no value")
    if not isinstance(raw, str):
        raise ValueError(f"unexpected result type {type(raw).__name__}")
    decoded = json.loads(raw)
    if not isinstance(decoded, dict):
        raise ValueError(f"{ENTRY_POINT} returned {type(decoded).__name__}, expected an object")
    return decoded


__all__ = [
    "DEFAULT_UTIL_CANDIDATES",
    "SandboxEvaluator",
    "build_unit",
    "extract_function",
    "run_in_isolate",
]
