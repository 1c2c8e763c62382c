"""The inspection pipeline: parse, resolve, link and optionally enrich a PURL."""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from purlviewer.config import API_CONFIG
from .badges import BadgeResult, get_badges
from .display import (
    get_share_url,
    render_components,
    render_purldb_section,
    render_registry,
    render_vulnerablecode,
)
from .parser import ParseError, parse_purl
from .purl import PackageURL
from .purldb import PurlDBClient, PurlDBPackage
from .registry import RegistryResult, get_registry_url
from .vulnerablecode import VulnerableCodeResult, get_vulnerablecode_url

logger = logging.getLogger(__name__)


class Inspection(BaseModel):
    """Everything the viewer shows for one PURL.

    Attributes:
        input: The trimmed PURL string as entered.
        purl: The parsed PURL.
        registry: The registry link or the reason there is none.
        vulnerablecode: The VulnerableCode search link.
        badges: Badges for the PURL, "Current version" first when versioned.
        share_url: Viewer URL that reopens this PURL.
        purldb_enabled: Whether PurlDB was queried.
        purldb_package: PurlDB data for the exact PURL, if any.
        purldb_versions: Known versions of the package from PurlDB.
        purldb_base_url: Root URL of the PurlDB instance that was queried.
    """

    input: str
    purl: PackageURL
    registry: RegistryResult
    vulnerablecode: VulnerableCodeResult
    badges: List[BadgeResult]
    share_url: str
    purldb_enabled: bool = False
    purldb_package: Optional[PurlDBPackage] = None
    purldb_versions: List[PurlDBPackage] = Field(default_factory=list)
    purldb_base_url: Optional[str] = None


def inspect_purl(
    raw: str,
    purldb_client: Optional[PurlDBClient] = None,
    base_url: Optional[str] = None,
) -> Union[Inspection, ParseError]:
    """Inspects a raw PURL string.

    Args:
        raw: The PURL string as entered by the user.
        purldb_client: When given, the package and its versions are fetched
            from PurlDB concurrently on the client's worker pool.
        base_url: Viewer URL used for the share link. Defaults to the
            configured viewer base URL.

    Returns:
        The Inspection, or the ParseError when the input is not a valid PURL.
    """
    result = parse_purl(raw)
    if not result.success:
        logger.debug(f"Rejected {raw!r}: {result.error.code}")
        return result.error

    purl_string = raw.strip()
    purl = result.purl
    inspection = Inspection(
        input=purl_string,
        purl=purl,
        registry=get_registry_url(purl),
        vulnerablecode=get_vulnerablecode_url(purl_string),
        badges=get_badges(purl_string),
        share_url=get_share_url(purl_string, base_url or API_CONFIG["viewer_base_url"]),
    )

    if purldb_client is None:
        return inspection

    pool = purldb_client.api_client
    package_future = pool.submit_task(purldb_client.fetch_package_by_purl, purl_string)
    versions_future = pool.submit_task(
        purldb_client.fetch_package_versions, purl.type, purl.namespace, purl.name
    )
    inspection.purldb_enabled = True
    inspection.purldb_base_url = pool.base_url
    inspection.purldb_package = package_future.result()
    inspection.purldb_versions = versions_future.result()
    return inspection


def render_inspection(inspection: Inspection, show_all_versions: bool = False) -> str:
    """Renders an Inspection as plain text.

    The PurlDB version list is capped unless `show_all_versions` is set.
    """
    sections = [
        ("Registry", render_registry(inspection.registry)),
        ("Vulnerabilities", render_vulnerablecode(inspection.vulnerablecode)),
        ("Components", render_components(inspection.purl)),
        ("Badges", "\n".join(f"{b.label}: {b.markdown}" for b in inspection.badges)),
        ("Share", inspection.share_url),
    ]
    text = "\n\n".join(f"{heading}\n{body}" for heading, body in sections)
    if inspection.purldb_enabled:
        text += "\n\n" + render_purldb_section(
            inspection.purldb_package,
            inspection.purldb_versions,
            inspection.input,
            show_all_versions=show_all_versions,
            purldb_base_url=inspection.purldb_base_url,
        )
    return text
