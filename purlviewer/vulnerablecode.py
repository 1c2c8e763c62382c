"""Links to VulnerableCode vulnerability database searches."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .badges import encode_uri_component

VULNERABLECODE_BASE_URL = "https://public.vulnerablecode.io/packages/search"


class VulnerableCodeResult(BaseModel):
    """A VulnerableCode search link with its display text."""

    model_config = ConfigDict(frozen=True)

    url: str
    label: str
    description: str


def get_vulnerablecode_url(purl_string: str) -> VulnerableCodeResult:
    """Generates the VulnerableCode search URL for a PURL string."""
    return VulnerableCodeResult(
        url=f"{VULNERABLECODE_BASE_URL}?search={encode_uri_component(purl_string)}",
        label="Check vulnerabilities",
        description="Search for known vulnerabilities in VulnerableCode database",
    )
