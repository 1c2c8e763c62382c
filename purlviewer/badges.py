"""Shields.io badge generation for PURL viewer links."""

from __future__ import annotations

from typing import List, Literal
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

SHIELDS_BADGE_URL = "https://img.shields.io/badge/PURL-viewer-blue"
PURL_VIEWER_BASE_URL = "https://s-celles.github.io/package-url-viewer/"

BadgeVariant = Literal["versioned", "latest"]

BADGE_LABELS = {
    "versioned": "Current version",
    "latest": "Latest",
}


class BadgeResult(BaseModel):
    """A generated badge.

    Attributes:
        image_url: The static Shields.io badge image.
        link_url: Deep link to the PURL viewer for `purl_display`.
        markdown: Markdown image-link embedding both URLs.
        label: "Current version" or "Latest".
        purl_display: The PURL string the badge links to.
    """

    model_config = ConfigDict(frozen=True)

    image_url: str
    link_url: str
    markdown: str
    label: str
    purl_display: str


def encode_uri_component(value: str) -> str:
    """Percent-encodes a value for use as a single query-parameter value.

    Leaves the same characters unescaped as JavaScript's encodeURIComponent.
    """
    return quote(value, safe="!*'()")


def _cut_version(purl_string: str, at_index: int) -> str:
    # The version runs from '@' to the first '?' or '#', or to the end.
    end_index = len(purl_string)
    for marker in ("?", "#"):
        marker_index = purl_string.find(marker, at_index)
        if marker_index != -1:
            end_index = min(end_index, marker_index)
    return purl_string[:at_index] + purl_string[end_index:]


def _strip_once(purl_string: str) -> str:
    at_index = purl_string.rfind("@")
    if at_index == -1:
        return purl_string

    scheme_end = purl_string.find(":")
    type_end = purl_string.find("/", scheme_end + 1)

    if at_index == type_end + 1:
        next_at = purl_string.find("@", at_index + 1)
        if next_at == -1:
            return purl_string
        return _cut_version(purl_string, next_at)

    return _cut_version(purl_string, at_index)


def strip_version(purl_string: str) -> str:
    """Removes the version component from a raw PURL string.

    Works on the still-encoded string so that qualifiers and subpath are kept
    byte-for-byte. An '@' directly after the type segment is an npm-style
    scope marker, not a version separator. Strings with several '@'
    separators are cut until none is left, so the result never has a
    version.

    Args:
        purl_string: The PURL string (e.g., "pkg:npm/lodash@4.17.21").

    Returns:
        The PURL without version (e.g., "pkg:npm/lodash"), or the input
        unchanged when it has no version.
    """
    stripped = _strip_once(purl_string)
    while stripped != purl_string:
        # Every cut removes at least the '@', so this terminates.
        purl_string, stripped = stripped, _strip_once(stripped)
    return stripped


def has_version(purl_string: str) -> bool:
    """Checks whether a raw PURL string carries a version."""
    return strip_version(purl_string) != purl_string


def generate_badge(purl_string: str, variant: BadgeVariant) -> BadgeResult:
    """Generates a single badge for a PURL.

    Args:
        purl_string: The original PURL string.
        variant: "versioned" links to the PURL as given, "latest" to the
            PURL without its version.
    """
    purl_to_use = strip_version(purl_string) if variant == "latest" else purl_string
    link_url = f"{PURL_VIEWER_BASE_URL}?purl={encode_uri_component(purl_to_use)}"

    return BadgeResult(
        image_url=SHIELDS_BADGE_URL,
        link_url=link_url,
        markdown=f"[![PURL Viewer]({SHIELDS_BADGE_URL})]({link_url})",
        label=BADGE_LABELS[variant],
        purl_display=purl_to_use,
    )


def get_badges(purl_string: str) -> List[BadgeResult]:
    """Gets all applicable badges for a PURL.

    Versioned PURLs get a "Current version" badge followed by a "Latest"
    badge; PURLs without version only get the "Latest" badge.
    """
    if has_version(purl_string):
        return [generate_badge(purl_string, "versioned"), generate_badge(purl_string, "latest")]
    return [generate_badge(purl_string, "latest")]
