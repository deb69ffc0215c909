"""Frontmatter, heading and display-text parsing for markdown content.

Everything in this module is a pure function of its arguments. Frontmatter
values come out of ``parse_frontmatter`` either as a string or as a list of
strings; ``attribute_text`` and ``attribute_list`` normalize them so callers
never branch on the shape again.
"""

from __future__ import annotations

import html
import json
import re
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

FrontmatterValue = Union[str, List[str]]
Attributes = Dict[str, FrontmatterValue]

FRONTMATTER_PATTERN = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*\n(.*)$", re.DOTALL)
HEADING_PATTERN = re.compile(r"^#{1,6}[ \t]+(.+)$", re.MULTILINE)
CLOSING_HASHES_PATTERN = re.compile(r"\s+#+\s*$")
CONTENT_WORD_PATTERN = re.compile(r"\b\w{4,}\b")
EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"
    "\U0001F300-\U0001F5FF"
    "\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF"
    "\U0001F900-\U0001F9FF"
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "\uFE0F"
    "]"
)
QUOTE_PATTERN = re.compile(r"[\"']")
WHITESPACE_PATTERN = re.compile(r"\s+")
BLANK_LINES_PATTERN = re.compile(r"\n\s*\n")

# Typographic characters folded to plain equivalents of the same length.
CHARACTER_FOLDS = str.maketrans(
    {
        "\u00a0": " ",
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u2013": "-",
        "\u2014": "-",
    }
)

DISPLAY_CONTENT_LIMIT = 400
KEYWORD_PREVIEW_CHARS = 1000
KEYWORD_CONTENT_WORDS = 20

CONTENT_TYPE_DIRECTORIES = {
    "blog": "blog",
    "portfolio": "portfolio",
    "projects": "project",
}
URL_PREFIXES = {
    "blog": "blog",
    "portfolio": "portfolio",
    "project": "projects",
}

# (label, tag terms, file name terms); first match wins.
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...], Tuple[str, ...]], ...] = (
    ("Strategy & Consulting", ("strategy", "consulting"), ("strategy", "governance")),
    (
        "Leadership & Culture",
        ("leadership", "culture", "talent", "team"),
        ("leadership", "culture", "talent"),
    ),
    (
        "Technology & Operations",
        ("devops", "technology", "saas", "automation"),
        ("devops", "saas", "ai-automation"),
    ),
    ("Data & Analytics", ("analytics", "data", "insights"), ("analytics",)),
    ("Risk & Compliance", ("risk", "compliance", "governance"), ("risk-compliance",)),
    ("Product & UX", ("product", "ux", "design"), ("product-ux",)),
    (
        "Education & Certifications",
        ("education", "certification"),
        ("education-certifications",),
    ),
    ("AI & Automation", ("ai", "artificial intelligence"), ("ai-automation",)),
    ("Project Portfolio", (), ("projects", "project-analysis")),
)
DEFAULT_PORTFOLIO_CATEGORY = "Strategy & Consulting"


def _parse_scalar(raw_value: str) -> FrontmatterValue:
    value = raw_value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        value = value[1:-1]

    if value.startswith("[") and value.endswith("]"):
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(entry).strip() for entry in parsed if str(entry).strip()]
        parts = (part.strip().replace('"', "").replace("'", "") for part in value[1:-1].split(","))
        return [part for part in parts if part]

    return value


def parse_frontmatter(raw: str) -> Tuple[Attributes, str]:
    """
    Split a document into frontmatter attributes and body.

    Only simple ``key: value`` lines are understood. A document without a
    well-formed leading ``---`` block is all body with no attributes.
    """
    text = (raw or "").replace("\r\n", "\n")
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text

    block, body = match.groups()
    attributes: Attributes = {}
    for line in block.split("\n"):
        key, separator, value = line.partition(":")
        key = key.strip()
        if not separator or not key:
            continue
        attributes[key] = _parse_scalar(value)
    return attributes, body


def attribute_text(attributes: Mapping[str, Any], *keys: str) -> Optional[str]:
    """Return the first non-empty attribute among ``keys`` as a string."""
    for key in keys:
        value = attributes.get(key)
        if isinstance(value, list):
            value = ", ".join(str(entry) for entry in value)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def attribute_list(attributes: Mapping[str, Any], *keys: str) -> List[str]:
    """Return the first present attribute among ``keys`` as a list of strings."""
    for key in keys:
        value = attributes.get(key)
        if value is None or value == "" or value == []:
            continue
        entries = value if isinstance(value, list) else [value]
        normalized: List[str] = []
        for entry in entries:
            parsed = _parse_scalar(str(entry))
            normalized.extend(parsed if isinstance(parsed, list) else [parsed])
        return [entry for entry in normalized if entry]
    return []


def normalize_text(value: str) -> str:
    """Decode HTML entities and fold typographic quotes, dashes and spaces."""
    return html.unescape(value).translate(CHARACTER_FOLDS)


def _clean_once(value: str) -> str:
    cleaned = normalize_text(value)
    cleaned = EMOJI_PATTERN.sub("", cleaned)
    cleaned = QUOTE_PATTERN.sub("", cleaned)
    return WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def clean_content_string(value: Optional[str]) -> str:
    """
    Strip quoting, emoji and stray whitespace from a short display string.

    Applied until nothing changes, so cleaning a cleaned string is a no-op.
    Every pass only shortens or folds characters, which bounds the loop.
    """
    if not value:
        return ""
    current = value
    while True:
        cleaned = _clean_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def clean_markdown_content(body: Optional[str]) -> str:
    """Drop emoji, collapse whitespace and bound length; markdown syntax stays."""
    if not body:
        return ""
    cleaned = EMOJI_PATTERN.sub("", normalize_text(body))
    cleaned = BLANK_LINES_PATTERN.sub("\n", cleaned)
    cleaned = WHITESPACE_PATTERN.sub(" ", cleaned).strip()
    if len(cleaned) > DISPLAY_CONTENT_LIMIT:
        cleaned = cleaned[:DISPLAY_CONTENT_LIMIT].strip() + "..."
    return cleaned


def extract_headings(body: str) -> List[str]:
    """Return ATX heading texts in document order."""
    headings: List[str] = []
    for match in HEADING_PATTERN.finditer(body or ""):
        heading = clean_content_string(CLOSING_HASHES_PATTERN.sub("", match.group(1)))
        if heading:
            headings.append(heading)
    return headings


def generate_search_keywords(
    attributes: Mapping[str, Any], body: str, headings: Iterable[str]
) -> List[str]:
    """
    Derive lowercase match tokens from tags, category, headings and body.

    Order is insertion order and identical for identical inputs.
    """
    keywords: Dict[str, None] = {}

    for tag in attribute_list(attributes, "tags"):
        keywords.setdefault(tag.lower(), None)

    category = attribute_text(attributes, "category")
    if category:
        keywords.setdefault(category.lower(), None)

    for heading in headings:
        for word in heading.lower().split():
            if len(word) > 3:
                keywords.setdefault(word, None)

    preview = (body or "")[:KEYWORD_PREVIEW_CHARS].lower()
    content_words: Dict[str, None] = {}
    for match in CONTENT_WORD_PATTERN.finditer(preview):
        content_words.setdefault(match.group(), None)
        if len(content_words) >= KEYWORD_CONTENT_WORDS:
            break
    for word in content_words:
        keywords.setdefault(word, None)

    keywords.pop("", None)
    return list(keywords)


def relative_content_path(path: str, content_root: str = "") -> str:
    """Strip the configured content root from a repository path."""
    root = content_root.strip("/")
    if root and path.startswith(f"{root}/"):
        return path[len(root) + 1 :]
    return path


def content_type_from_path(path: str, content_root: str = "") -> str:
    """Map a source path to blog, portfolio, project or page."""
    relative = relative_content_path(path, content_root)
    first, _, rest = relative.partition("/")
    if rest:
        return CONTENT_TYPE_DIRECTORIES.get(first, "page")
    return "page"


def url_from_path(path: str, content_type: str, content_root: str = "") -> str:
    """Derive the site-relative URL for a source path."""
    relative = relative_content_path(path, content_root)
    without_suffix = relative[:-3] if relative.endswith(".md") else relative
    prefix = URL_PREFIXES.get(content_type)
    if prefix and without_suffix.startswith(f"{prefix}/"):
        slug = without_suffix[len(prefix) + 1 :]
        return f"/{prefix}/{slug}"
    return f"/{without_suffix}"


def title_from_path(path: str) -> str:
    """Build a title from a file name: ``my-first_post.md`` -> ``My First Post``."""
    stem = PurePosixPath(path).name
    if stem.endswith(".md"):
        stem = stem[:-3]
    spaced = re.sub(r"[-_]", " ", stem)
    return re.sub(r"\b\w", lambda match: match.group().upper(), spaced)


def category_from_tags(tags: Iterable[str], file_name: str) -> Optional[str]:
    """Guess a human category label from tags and the file name."""
    tag_string = " ".join(tags).lower()
    name = file_name.lower()
    for label, tag_terms, name_terms in CATEGORY_RULES:
        if any(term in tag_string for term in tag_terms) or any(term in name for term in name_terms):
            return label
    return None


__all__ = [
    "Attributes",
    "FrontmatterValue",
    "parse_frontmatter",
    "attribute_text",
    "attribute_list",
    "normalize_text",
    "clean_content_string",
    "clean_markdown_content",
    "extract_headings",
    "generate_search_keywords",
    "relative_content_path",
    "content_type_from_path",
    "url_from_path",
    "title_from_path",
    "category_from_tags",
    "DEFAULT_PORTFOLIO_CATEGORY",
]
