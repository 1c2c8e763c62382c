"""PURL viewer: registry links, vulnerability links and badges for Package URLs."""

from .api_client import APIClient
from .badges import BadgeResult, generate_badge, get_badges, has_version, strip_version
from .parser import ParseError, ParseResult, get_error_message, is_valid_purl_type, parse_purl
from .purl import VALID_PURL_TYPES, PackageURL
from .purldb import PurlDBClient, PurlDBPackage, get_purldb_url
from .registry import RegistryMapping, RegistryResult, get_registry_mapping, get_registry_url
from .viewer import Inspection, inspect_purl, render_inspection
from .vulnerablecode import VulnerableCodeResult, get_vulnerablecode_url

__all__ = [
    "APIClient",
    "BadgeResult",
    "generate_badge",
    "get_badges",
    "get_error_message",
    "get_purldb_url",
    "get_registry_mapping",
    "get_registry_url",
    "get_vulnerablecode_url",
    "has_version",
    "Inspection",
    "inspect_purl",
    "is_valid_purl_type",
    "PackageURL",
    "parse_purl",
    "ParseError",
    "ParseResult",
    "PurlDBClient",
    "PurlDBPackage",
    "RegistryMapping",
    "RegistryResult",
    "render_inspection",
    "strip_version",
    "VALID_PURL_TYPES",
    "VulnerableCodeResult",
]
