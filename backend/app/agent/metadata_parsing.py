"""
Turns unreliable generative-text output into an ImageMetadata triple.

Parsing is an ordered chain of total parsers: each returns an ImageMetadata or
None and never raises. The first non-None result wins; a templated fallback
closes the chain so callers always receive a well-formed triple.
"""

import json
import re
from collections.abc import Callable, Iterator
from typing import NamedTuple

from app.agent.artifacts import METADATA_TITLE_MAX_CHARS, ImageMetadata

_FENCE_MARKER_RE = re.compile(r"```[a-zA-Z0-9_-]*", re.IGNORECASE)
_TITLE_RE = re.compile(r'"title"\s*:\s*"([^"]*?)"', re.IGNORECASE)
_DESCRIPTION_RE = re.compile(r'"description"\s*:\s*"([^"]*?)"', re.IGNORECASE)
_TAGS_RE = re.compile(r'"tags"\s*:\s*\[([\s\S]*?)\]', re.IGNORECASE)
_QUOTED_RE = re.compile(r'"([^"]*?)"')


class MetadataContext(NamedTuple):
    character_id: str
    style: str
    variation: int


MetadataParser = Callable[[str, MetadataContext], ImageMetadata | None]


def default_tags(context: MetadataContext) -> list[str]:
    return [context.character_id, context.style, "character", "ai-generated"]


def strip_code_fences(text: str) -> str:
    """Remove every markdown fence marker (```json, ```), wherever it appears."""
    if not text:
        return ""
    return _FENCE_MARKER_RE.sub("", text).strip()


def iter_json_object_spans(text: str) -> Iterator[str]:
    """
    Yield each outermost balanced {...} span in order of appearance.
    Single pass: unmatched opening braces stay open and never trigger a rescan.
    """
    open_starts: list[int] = []
    spans: list[tuple[int, int]] = []
    in_string = False
    escape = False
    for i, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"' and open_starts:
            in_string = True
        elif ch == "{":
            open_starts.append(i)
        elif ch == "}" and open_starts:
            start = open_starts.pop()
            # A span that closes around earlier spans replaces them.
            while spans and spans[-1][0] > start:
                spans.pop()
            spans.append((start, i + 1))

    for start, end in spans:
        yield text[start:end]


def extract_largest_json_object(text: str) -> str | None:
    return max(iter_json_object_spans(text or ""), key=len, default=None)


def parse_json_metadata(raw_text: str, context: MetadataContext) -> ImageMetadata | None:
    cleaned = strip_code_fences(raw_text)
    candidate = extract_largest_json_object(cleaned) or cleaned
    if not candidate:
        return None
    try:
        data = json.loads(candidate, strict=False)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None

    title = data.get("title")
    description = data.get("description")
    tags = data.get("tags")
    if not isinstance(title, str) and not isinstance(description, str) and not isinstance(tags, list):
        return None

    return ImageMetadata(
        title=(
            title[:METADATA_TITLE_MAX_CHARS]
            if isinstance(title, str)
            else f"{context.character_id} - Variation {context.variation}"[:METADATA_TITLE_MAX_CHARS]
        ),
        description=(
            description
            if isinstance(description, str)
            else f"A {context.style} style artwork featuring {context.character_id} in a dynamic pose."
        ),
        tags=(
            [tag for tag in tags if isinstance(tag, str)]
            if isinstance(tags, list)
            else default_tags(context)
        ),
    )


def parse_regex_metadata(raw_text: str, context: MetadataContext) -> ImageMetadata | None:
    text = raw_text or ""
    title_match = _TITLE_RE.search(text)
    description_match = _DESCRIPTION_RE.search(text)
    tags_match = _TAGS_RE.search(text)
    if not (title_match or description_match or tags_match):
        return None

    tags = default_tags(context)
    if tags_match:
        tags = [
            tag.strip()
            for tag in _QUOTED_RE.findall(tags_match.group(1))
            if tag.strip()
        ] or [*default_tags(context), "artwork"]

    return ImageMetadata(
        title=(
            title_match.group(1)
            if title_match
            else f"{context.character_id} - {context.style} Style"
        )[:METADATA_TITLE_MAX_CHARS],
        description=(
            description_match.group(1)
            if description_match
            else (
                f"A stunning {context.style} style artwork featuring {context.character_id} "
                "with intricate details and dynamic composition."
            )
        ),
        tags=tags,
    )


def fallback_metadata(context: MetadataContext) -> ImageMetadata:
    return ImageMetadata(
        title=f"{context.character_id} - Variation {context.variation}"[:METADATA_TITLE_MAX_CHARS],
        description=(
            f"An AI-generated {context.style} style image of {context.character_id} "
            "with unique artistic interpretation."
        ),
        tags=default_tags(context),
    )


METADATA_PARSERS: tuple[MetadataParser, ...] = (
    parse_json_metadata,
    parse_regex_metadata,
)


def parse_image_metadata(
    raw_text: str | None,
    *,
    character_id: str,
    style: str,
    variation: int,
) -> ImageMetadata:
    context = MetadataContext(character_id=character_id, style=style, variation=variation)
    for parser in METADATA_PARSERS:
        metadata = parser(raw_text or "", context)
        if metadata is not None:
            return metadata
    return fallback_metadata(context)
