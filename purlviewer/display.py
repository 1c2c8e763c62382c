"""Plain-text rendering of inspection results and PurlDB data."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .purl import PackageURL
from .purldb import PURLDB_MAX_VERSIONS_DISPLAY, PurlDBDependency, PurlDBPackage, get_purldb_url
from .registry import RegistryResult
from .utils import format_date, parse_release_date
from .vulnerablecode import VulnerableCodeResult

LICENSE_UNAVAILABLE = "License information not available"
VERSIONS_UNAVAILABLE = "No version information available"
NO_OTHER_VERSIONS = "No other versions available"
METADATA_UNAVAILABLE = "Package details not available"
NO_DEPENDENCIES = "No dependencies found"


def get_share_url(purl_string: str, base_url: str) -> str:
    """Returns `base_url` with its `purl` query parameter set to the PURL."""
    scheme, netloc, path, query, fragment = urlsplit(base_url)
    params = [(k, v) for k, v in parse_qsl(query, keep_blank_values=True) if k != "purl"]
    params.append(("purl", purl_string))
    return urlunsplit((scheme, netloc, path, urlencode(params), fragment))


def _table(rows: Sequence[Tuple[str, str]]) -> str:
    width = max((len(label) for label, _ in rows), default=0)
    return "\n".join(f"{label.ljust(width)}  {value}" for label, value in rows)


def render_components(purl: PackageURL) -> str:
    """Renders the PURL components as an aligned two-column table."""
    return _table(purl.components())


def render_registry(registry: RegistryResult) -> str:
    if registry.url:
        return f"{registry.registry_name}: {registry.url}"
    return f"{registry.registry_name}: {registry.message or 'No direct link available'}"


def render_vulnerablecode(result: VulnerableCodeResult) -> str:
    return f"VulnerableCode ({result.label}): {result.url}"


def render_license_info(pkg: Optional[PurlDBPackage]) -> str:
    if pkg is None or not pkg.license:
        return LICENSE_UNAVAILABLE
    return pkg.license


def _compare_versions(a: PurlDBPackage, b: PurlDBPackage) -> int:
    # Newest release first, undated entries last, then version string descending.
    a_date = parse_release_date(a.release_date)
    b_date = parse_release_date(b.release_date)
    if a_date and b_date:
        return (b_date > a_date) - (b_date < a_date)
    if a_date:
        return -1
    if b_date:
        return 1
    a_version, b_version = a.version or "", b.version or ""
    return (b_version > a_version) - (b_version < a_version)


def sort_versions(versions: Sequence[PurlDBPackage]) -> List[PurlDBPackage]:
    """Sorts versions newest first and drops entries without a version."""
    ordered = sorted(versions, key=cmp_to_key(_compare_versions))
    return [v for v in ordered if v.version]


def render_version_list(
    versions: Sequence[PurlDBPackage],
    current_purl: str,
    show_all: bool = False,
) -> str:
    """Renders the known versions of a package, newest first.

    At most `PURLDB_MAX_VERSIONS_DISPLAY` entries are listed unless
    `show_all` is set. The entry matching `current_purl` is marked.
    """
    if not versions:
        return VERSIONS_UNAVAILABLE

    with_version = sort_versions(versions)
    if not with_version:
        return NO_OTHER_VERSIONS

    shown = with_version if show_all else with_version[:PURLDB_MAX_VERSIONS_DISPLAY]
    lines = []
    for v in shown:
        marker = "*" if v.purl == current_purl else "-"
        release_info = f" ({format_date(v.release_date)})" if v.release_date else ""
        lines.append(f"{marker} {v.version}{release_info}")

    if not show_all and len(with_version) > PURLDB_MAX_VERSIONS_DISPLAY:
        lines.append(f"Show all {len(with_version)} versions")
    return "\n".join(lines)


def render_metadata(pkg: Optional[PurlDBPackage]) -> str:
    if pkg is None:
        return METADATA_UNAVAILABLE

    rows: List[Tuple[str, str]] = []
    if pkg.description:
        rows.append(("Description", pkg.description))
    if pkg.homepage_url:
        rows.append(("Homepage", pkg.homepage_url))
    if pkg.repository_homepage_url:
        rows.append(("Repository", pkg.repository_homepage_url))
    if pkg.release_date:
        rows.append(("Release Date", format_date(pkg.release_date)))
    if pkg.keywords:
        rows.append(("Keywords", ", ".join(pkg.keywords)))

    if not rows:
        return METADATA_UNAVAILABLE
    return _table(rows)


def render_dependencies(deps: Sequence[PurlDBDependency]) -> str:
    """Renders dependencies grouped by scope, in first-seen scope order."""
    if not deps:
        return NO_DEPENDENCIES

    grouped: Dict[str, List[PurlDBDependency]] = {}
    for dep in deps:
        grouped.setdefault(dep.scope or "runtime", []).append(dep)

    lines = []
    for scope, scope_deps in grouped.items():
        lines.append(f"{scope} ({len(scope_deps)})")
        for dep in scope_deps:
            optional = " [optional]" if dep.is_optional else ""
            lines.append(f"  - {dep.purl}{optional}")
    return "\n".join(lines)


def render_purldb_section(
    pkg: Optional[PurlDBPackage],
    versions: Sequence[PurlDBPackage],
    current_purl: str,
    show_all_versions: bool = False,
    purldb_base_url: Optional[str] = None,
) -> str:
    """Renders the PurlDB part of the report.

    `purldb_base_url` is the instance that was queried; the direct API link
    points there.
    """
    dependencies = pkg.get_dependencies() if pkg else []
    sections = [
        ("PurlDB", get_purldb_url(current_purl, purldb_base_url)),
        ("License", render_license_info(pkg)),
        ("Available Versions", render_version_list(versions, current_purl, show_all=show_all_versions)),
        ("Package Details", render_metadata(pkg)),
        ("Dependencies", render_dependencies(dependencies)),
    ]
    return "\n\n".join(f"{heading}\n{body}" for heading, body in sections)
