"""Reconciles sandbox output or static page text into a :class:`MetadataRecord`.

Three tiers, best first: the actual ``generateSEO`` output, the extracted call
parameters mapped to schema types, and literal substring search of the page.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .analyzers.params import scalar_pattern
from .models import MetadataRecord, ParameterSet, SchemaType

TITLE_MIN = 30
TITLE_MAX = 60
DESCRIPTION_MIN = 120
DESCRIPTION_MAX = 160

SHORT = "short"
LONG = "long"
OPTIMAL = "optimal"

REQUIRED_OG_TAGS: tuple[str, ...] = ("title", "description", "image", "url")
REQUIRED_TWITTER_TAGS: tuple[str, ...] = ("card", "title", "description", "image")

# generateSEO always emits these, so pages calling it get them for free.
ASSUMED_OG_TAGS: tuple[str, ...] = ("title", "description", "image", "url", "type", "site_name")
ASSUMED_TWITTER_TAGS: tuple[str, ...] = ("card", "title", "description", "image", "site")

OG_ALIASES: Dict[str, tuple[str, ...]] = {
    "title": ("og:title", "ogTitle"),
    "description": ("og:description", "ogDescription"),
    "image": ("og:image", "ogImage"),
    "url": ("og:url", "ogUrl"),
    "type": ("og:type", "ogType"),
    "site_name": ("og:site_name", "ogSiteName"),
}
TWITTER_ALIASES: Dict[str, tuple[str, ...]] = {
    "card": ("twitter:card", "twitterCard"),
    "title": ("twitter:title", "twitterTitle"),
    "description": ("twitter:description", "twitterDescription"),
    "image": ("twitter:image", "twitterImage"),
    "site": ("twitter:site", "twitterSite"),
}

COLLECTION_SCHEMAS: tuple[Tuple[str, str, str], ...] = (
    ("faqs", "FAQPage", "FAQs"),
    ("products", "Product", "products"),
    ("services", "Service", "services"),
    ("branches", "LocalBusiness", "branches"),
    ("news", "NewsArticle", "articles"),
)
FLAG_SCHEMAS: tuple[Tuple[str, str], ...] = (
    ("grant", "Grant"),
    ("contactPage", "ContactPage"),
    ("awards", "Awards"),
    ("breadcrumb", "BreadcrumbList"),
)
BASE_SCHEMAS: tuple[str, ...] = ("WebPage", "Organization")

LEGACY_SCHEMA_MARKERS: tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("contactPage:",), "ContactPage"),
    (("grant:",), "Grant"),
    (("products:",), "Product"),
    (("services:",), "Service"),
    (("faqs:",), "FAQPage"),
    (("breadcrumb:", "breadcrumbs:"), "BreadcrumbList"),
)

CANONICAL_MARKERS: tuple[str, ...] = (
    "canonical:",
    "rel: 'canonical'",
    'rel: "canonical"',
    'rel="canonical"',
)

_TITLE_RE = scalar_pattern("title")
_DESCRIPTION_RE = scalar_pattern("description")


def classify_title_length(length: int) -> str:
    if length < TITLE_MIN:
        return SHORT
    if length > TITLE_MAX:
        return LONG
    return OPTIMAL


def classify_description_length(length: int) -> str:
    if length < DESCRIPTION_MIN:
        return SHORT
    if length > DESCRIPTION_MAX:
        return LONG
    return OPTIMAL


def normalize_metadata(
    text: str,
    *,
    params: Optional[ParameterSet] = None,
    output: Optional[Mapping[str, Any]] = None,
    uses_declaration: bool = False,
) -> MetadataRecord:
    """Build the canonical metadata record for a page.

    ``output`` is the sandboxed ``generateSEO`` result; when it carries a
    ``meta`` list it is authoritative, otherwise the page text is inspected.
    ``uses_declaration`` says whether the page calls ``generateSEO`` at all.
    """
    if output is not None and isinstance(output.get("meta"), list):
        record = _from_output(output, output["meta"])
        record.schemas = _schemas_from_output(output, params)
    else:
        record = _from_text(text, uses_declaration=uses_declaration)
        record.schemas = schemas_from_params(params) if params is not None else []

    if not record.schemas and uses_declaration:
        record.schemas = legacy_schemas(text)

    # The page image is the call-site argument; generated og:image stays in og_image.
    record.image = params.image if params is not None else None
    return record


def schemas_from_params(params: ParameterSet) -> List[SchemaType]:
    """Map extracted call parameters to the schema types ``generateSEO`` would emit."""
    schemas = [SchemaType(name) for name in BASE_SCHEMAS]
    for field_name, type_name, unit in COLLECTION_SCHEMAS:
        count = params.count(field_name)
        if count > 0:
            schemas.append(SchemaType(type_name, count=count, unit=unit))
    for field_name, type_name in FLAG_SCHEMAS:
        if params.has_flag(field_name):
            schemas.append(SchemaType(type_name))
    return schemas


def legacy_schemas(text: str) -> List[SchemaType]:
    """Detect schema types from property names alone."""
    found: List[SchemaType] = []
    for markers, type_name in LEGACY_SCHEMA_MARKERS:
        if any(marker in text for marker in markers):
            found.append(SchemaType(type_name))
    return found


# ----------------------------------------------------------------------
# Dynamic output


def _from_output(output: Mapping[str, Any], meta: Sequence[Any]) -> MetadataRecord:
    record = MetadataRecord(source="dynamic")
    entries = [entry for entry in meta if isinstance(entry, dict)]

    title = _find_entry(entries, "title")
    if title is not None:
        _apply_title(record, _content(title))
    else:
        record.add_issue("Missing page title")

    description = _find_entry(entries, "description")
    if description is not None:
        _apply_description(record, _content(description))
    else:
        record.add_issue("Missing meta description")

    for entry in entries:
        prop = entry.get("property")
        if isinstance(prop, str) and prop.startswith("og:"):
            tag = prop[len("og:"):]
            record.og_tags[tag] = True
            if tag == "image":
                record.og_image = _content(entry) or None
        name = entry.get("name")
        if isinstance(name, str) and name.startswith("twitter:"):
            record.twitter_tags[name[len("twitter:"):]] = True

    links = output.get("link")
    if isinstance(links, list):
        record.canonical = any(
            isinstance(link, dict) and link.get("rel") == "canonical" for link in links
        )

    _flag_missing_social(record)
    if not record.canonical:
        record.add_issue("Missing canonical URL")
    return record


def _schemas_from_output(
    output: Mapping[str, Any], params: Optional[ParameterSet]
) -> List[SchemaType]:
    payload = _script_payload(output)
    if payload is None:
        return schemas_from_params(params) if params is not None else []
    try:
        graph = json.loads(payload) if isinstance(payload, str) else payload
    except ValueError:
        return schemas_from_params(params) if params is not None else []
    if not isinstance(graph, dict):
        return []
    members = graph.get("@graph")
    if not isinstance(members, list):
        return []
    return list(_graph_types(members))


def _graph_types(members: Iterable[Any]) -> Iterable[SchemaType]:
    for item in members:
        if not isinstance(item, dict) or not item.get("@type"):
            continue
        type_value = item["@type"]
        names = type_value if isinstance(type_value, list) else [type_value]
        for name in names:
            name = str(name)
            entities = item.get("mainEntity")
            if name == "FAQPage" and isinstance(entities, list):
                yield SchemaType(name, count=len(entities), unit="FAQs")
            else:
                yield SchemaType(name)


def _script_payload(output: Mapping[str, Any]) -> Any:
    scripts = output.get("script")
    if not isinstance(scripts, list) or not scripts:
        return None
    first = scripts[0]
    if not isinstance(first, dict):
        return None
    return first.get("innerHTML") or None


def _find_entry(entries: Sequence[Dict[str, Any]], key: str) -> Optional[Dict[str, Any]]:
    for entry in entries:
        if entry.get("name") == key or entry.get("hid") == key:
            return entry
    return None


def _content(entry: Mapping[str, Any]) -> str:
    value = entry.get("content")
    return "" if value is None else str(value)


# ----------------------------------------------------------------------
# Static fallback


def _from_text(text: str, *, uses_declaration: bool) -> MetadataRecord:
    record = MetadataRecord(source="static")

    title = _TITLE_RE.search(text)
    if title:
        _apply_title(record, title.group(1))
    else:
        record.add_issue("Missing page title")

    description = _DESCRIPTION_RE.search(text)
    if description:
        _apply_description(record, description.group(1))
    else:
        record.add_issue("Missing meta description")

    if uses_declaration:
        record.og_tags = {tag: True for tag in ASSUMED_OG_TAGS}
        record.twitter_tags = {tag: True for tag in ASSUMED_TWITTER_TAGS}
        record.canonical = True
        return record

    record.og_tags = _present_tags(text, OG_ALIASES)
    record.twitter_tags = _present_tags(text, TWITTER_ALIASES)
    _flag_missing_social(record)

    record.canonical = any(marker in text for marker in CANONICAL_MARKERS)
    if not record.canonical:
        record.add_issue("Missing canonical URL")
    return record


def _present_tags(text: str, aliases: Mapping[str, Sequence[str]]) -> Dict[str, bool]:
    return {
        tag: True for tag, names in aliases.items() if any(name in text for name in names)
    }


# ----------------------------------------------------------------------
# Shared checks


def _apply_title(record: MetadataRecord, title: str) -> None:
    record.title = title
    record.title_length = len(title)
    record.title_band = classify_title_length(record.title_length)
    if record.title_band == SHORT:
        record.add_issue(f"Title too short ({record.title_length} chars, recommended: 50-60)")
    elif record.title_band == LONG:
        record.add_issue(f"Title too long ({record.title_length} chars, recommended: 50-60)")


def _apply_description(record: MetadataRecord, description: str) -> None:
    record.description = description
    record.description_length = len(description)
    record.description_band = classify_description_length(record.description_length)
    length = record.description_length
    if record.description_band == SHORT:
        record.add_issue(f"Meta description too short ({length} chars, recommended: 120-160)")
    elif record.description_band == LONG:
        record.add_issue(f"Meta description too long ({length} chars, recommended: 120-160)")


def _flag_missing_social(record: MetadataRecord) -> None:
    missing_og = [tag for tag in REQUIRED_OG_TAGS if not record.og_tags.get(tag)]
    if missing_og:
        record.add_issue(f"Missing Open Graph tags: {', '.join(missing_og)}")
    missing_twitter = [tag for tag in REQUIRED_TWITTER_TAGS if not record.twitter_tags.get(tag)]
    if missing_twitter:
        record.add_issue(f"Missing Twitter Card tags: {', '.join(missing_twitter)}")


__all__ = [
    "DESCRIPTION_MAX",
    "DESCRIPTION_MIN",
    "LONG",
    "OPTIMAL",
    "SHORT",
    "TITLE_MAX",
    "TITLE_MIN",
    "classify_description_length",
    "classify_title_length",
    "legacy_schemas",
    "normalize_metadata",
    "schemas_from_params",
]
