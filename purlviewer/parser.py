"""Validation and decomposition of raw PURL strings."""

from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from packageurl import PackageURL as DecodedPackageURL
from pydantic import BaseModel, ConfigDict, model_validator

from .purl import VALID_PURL_TYPES, PackageURL

logger = logging.getLogger(__name__)

ErrorCode = Literal[
    "INVALID_FORMAT",
    "MISSING_TYPE",
    "MISSING_NAME",
    "UNKNOWN_TYPE",
    "INVALID_COMPONENT",
]

PURL_PREFIX = "pkg:"


class PurlDecodeError(ValueError):
    """Raised by the grammar decoder when a PURL string cannot be decoded.

    Attributes:
        reason: Human-readable failure reason, free of the offending input.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ParseError(BaseModel):
    """A classified parse failure with its user-facing message."""

    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str


class ParseResult(BaseModel):
    """Outcome of `parse_purl`: either a `purl` or an `error`, never both.

    Callers must branch on `success` before reading `purl`.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    purl: Optional[PackageURL] = None
    error: Optional[ParseError] = None

    @model_validator(mode="after")
    def check_tagged_union(self) -> "ParseResult":
        if self.success and (self.purl is None or self.error is not None):
            raise ValueError("A successful ParseResult carries a purl and no error.")
        if not self.success and (self.error is None or self.purl is not None):
            raise ValueError("A failed ParseResult carries an error and no purl.")
        return self

    @classmethod
    def ok(cls, purl: PackageURL) -> "ParseResult":
        return cls(success=True, purl=purl)

    @classmethod
    def fail(cls, code: ErrorCode, details: Optional[str] = None) -> "ParseResult":
        return cls(success=False, error=ParseError(code=code, message=get_error_message(code, details)))


def is_valid_purl_type(purl_type: str) -> bool:
    """Checks a type against the official PURL types. Case-sensitive."""
    return purl_type in VALID_PURL_TYPES


def get_error_message(code: ErrorCode, details: Optional[str] = None) -> str:
    """Returns the user-facing message for an error code.

    Args:
        code: One of the `ErrorCode` values.
        details: The offending type for UNKNOWN_TYPE, or the decoder's reason
            for INVALID_COMPONENT. Ignored for the other codes.
    """
    if code == "INVALID_FORMAT":
        return 'Invalid PURL format. A valid PURL must start with "pkg:" followed by type/name (e.g., pkg:npm/lodash).'
    if code == "MISSING_TYPE":
        return 'Missing package type. The PURL must include a type after "pkg:" (e.g., pkg:npm/lodash).'
    if code == "MISSING_NAME":
        return 'Missing package name. The PURL must include a package name (e.g., pkg:npm/lodash).'
    if code == "UNKNOWN_TYPE":
        return f'Unknown package type "{details}". This type is not recognized in the official PURL specification.'
    if code == "INVALID_COMPONENT":
        return f"Invalid PURL component: {details or 'The PURL contains invalid characters or structure.'}"
    return "An unknown error occurred while parsing the PURL."


def decode_purl(purl: str) -> Dict[str, Any]:
    """Decodes a `pkg:` string into its percent-decoded components.

    Wraps `packageurl.PackageURL.from_string`. A type segment that is not
    followed by a `/` (e.g. ``pkg:npm``) is reported as a missing name.

    Returns:
        A dict with keys type, namespace, name, version, qualifiers, subpath.

    Raises:
        PurlDecodeError: If the string does not follow the PURL grammar.
    """
    _, _, remainder = purl.partition(":")
    type_segment, sep, _ = remainder.strip().lstrip("/").partition("/")
    if type_segment and not sep:
        raise PurlDecodeError("purl is missing the required name component.")

    try:
        decoded = DecodedPackageURL.from_string(purl)
    except ValueError as e:
        # The library echoes the input back; drop it so only the reason remains.
        reason = str(e).replace(f": {purl!r}", "").replace(f" {purl!r}", "")
        raise PurlDecodeError(reason) from e
    return decoded.to_dict()


def parse_purl(input: str) -> ParseResult:
    """Parses a PURL string into a `ParseResult`.

    Never raises: every failure is returned as a `ParseError`.

    Args:
        input: The raw user input, e.g. ``"pkg:npm/lodash@4.17.21"``.

    Returns:
        A successful result holding a `PackageURL` whose type is one of
        `VALID_PURL_TYPES`, or a failed result holding the classified error.
    """
    trimmed = input.strip()

    if not trimmed or not trimmed.startswith(PURL_PREFIX):
        return ParseResult.fail("INVALID_FORMAT")

    try:
        parsed = decode_purl(trimmed)
    except PurlDecodeError as e:
        logger.debug(f"Decoding {trimmed!r} failed: {e.reason}")
        message = e.reason.lower()
        if "type" in message:
            return ParseResult.fail("MISSING_TYPE")
        if "name" in message:
            return ParseResult.fail("MISSING_NAME")
        return ParseResult.fail("INVALID_COMPONENT", e.reason)

    if not is_valid_purl_type(parsed["type"]):
        return ParseResult.fail("UNKNOWN_TYPE", parsed["type"])

    fields: Dict[str, Any] = {"type": parsed["type"], "name": parsed["name"]}
    for key in ("namespace", "version", "subpath"):
        if parsed.get(key):
            fields[key] = parsed[key]
    if parsed.get("qualifiers"):
        fields["qualifiers"] = dict(parsed["qualifiers"])

    return ParseResult.ok(PackageURL(**fields))
