"""Tests for version stripping and badge generation."""
import pytest

from purlviewer.badges import (
    PURL_VIEWER_BASE_URL,
    SHIELDS_BADGE_URL,
    encode_uri_component,
    generate_badge,
    get_badges,
    has_version,
    strip_version,
)


@pytest.mark.parametrize(
    "purl, expected",
    [
        ("pkg:npm/lodash@4.17.21", "pkg:npm/lodash"),
        ("pkg:npm/lodash", "pkg:npm/lodash"),
        ("pkg:npm/@angular/core@15.0.0", "pkg:npm/@angular/core"),
        ("pkg:npm/@angular/core", "pkg:npm/@angular/core"),
        ("pkg:maven/org.apache.commons/commons-lang3@3.12.0", "pkg:maven/org.apache.commons/commons-lang3"),
        ("pkg:pypi/requests@2.28.0", "pkg:pypi/requests"),
        ("pkg:npm/lodash@4.17.21?repository_url=https://example.com", "pkg:npm/lodash?repository_url=https://example.com"),
        ("pkg:npm/lodash@4.17.21#dist/lodash.js", "pkg:npm/lodash#dist/lodash.js"),
        ("pkg:deb/debian/curl@7.88.1?arch=amd64#usr/bin", "pkg:deb/debian/curl?arch=amd64#usr/bin"),
        ("pkg:npm/@angular/core@15.0.0?a=b", "pkg:npm/@angular/core?a=b"),
        ("pkg:npm/%40angular/core@15.0.0", "pkg:npm/%40angular/core"),
        ("not a purl", "not a purl"),
        ("", ""),
    ],
)
def test_strip_version(purl: str, expected: str) -> None:
    """Test that only the version token and its '@' are removed."""
    assert strip_version(purl) == expected


@pytest.mark.parametrize(
    "purl",
    [
        "pkg:npm/lodash@4.17.21",
        "pkg:npm/@angular/core@15.0.0",
        "pkg:npm/a@1@2",
        "pkg:npm/@scope@",
        "pkg:npm/lodash?vcs_url=git@github.com:lodash/lodash.git",
        "@",
        "a@b@c",
        "pkg:golang/github.com/x/y@v1.0.0#sub@path",
        "",
    ],
)
def test_strip_version_is_idempotent(purl: str) -> None:
    """Test that stripping twice changes nothing and leaves no version behind."""
    stripped = strip_version(purl)
    assert strip_version(stripped) == stripped
    assert has_version(stripped) is False


def test_has_version() -> None:
    """Test version detection, including npm scopes."""
    assert has_version("pkg:npm/lodash@4.17.21") is True
    assert has_version("pkg:npm/lodash") is False
    assert has_version("pkg:npm/@angular/core@15.0.0") is True
    assert has_version("pkg:npm/@angular/core") is False


def test_encode_uri_component() -> None:
    """Test that encoding matches JavaScript's encodeURIComponent."""
    assert encode_uri_component("pkg:npm/lodash@4.17.21") == "pkg%3Anpm%2Flodash%404.17.21"
    assert encode_uri_component("a b?c=d&e#f") == "a%20b%3Fc%3Dd%26e%23f"
    assert encode_uri_component("-_.!~*'()") == "-_.!~*'()"


def test_generate_versioned_badge() -> None:
    """Test the versioned badge for a PURL with version."""
    badge = generate_badge("pkg:npm/lodash@4.17.21", "versioned")
    link = f"{PURL_VIEWER_BASE_URL}?purl=pkg%3Anpm%2Flodash%404.17.21"
    assert badge.image_url == SHIELDS_BADGE_URL == "https://img.shields.io/badge/PURL-viewer-blue"
    assert badge.link_url == "https://s-celles.github.io/package-url-viewer/?purl=pkg%3Anpm%2Flodash%404.17.21"
    assert badge.link_url == link
    assert badge.markdown == f"[![PURL Viewer]({SHIELDS_BADGE_URL})]({link})"
    assert badge.label == "Current version"
    assert badge.purl_display == "pkg:npm/lodash@4.17.21"


def test_generate_latest_badge() -> None:
    """Test the latest badge, which drops the version."""
    badge = generate_badge("pkg:npm/lodash@4.17.21", "latest")
    assert badge.link_url == "https://s-celles.github.io/package-url-viewer/?purl=pkg%3Anpm%2Flodash"
    assert badge.markdown == (
        "[![PURL Viewer](https://img.shields.io/badge/PURL-viewer-blue)]"
        "(https://s-celles.github.io/package-url-viewer/?purl=pkg%3Anpm%2Flodash)"
    )
    assert badge.label == "Latest"
    assert badge.purl_display == "pkg:npm/lodash"


def test_badge_encodes_scoped_purl() -> None:
    """Test that the whole PURL is encoded as one query value."""
    badge = generate_badge("pkg:npm/@angular/core@15.0.0", "versioned")
    assert badge.link_url.endswith("?purl=pkg%3Anpm%2F%40angular%2Fcore%4015.0.0")
    assert badge.purl_display == "pkg:npm/@angular/core@15.0.0"


def test_get_badges_without_version() -> None:
    """Test that unversioned PURLs only get the Latest badge."""
    badges = get_badges("pkg:npm/lodash")
    assert [b.label for b in badges] == ["Latest"]
    assert badges[0].purl_display == "pkg:npm/lodash"


def test_get_badges_with_version() -> None:
    """Test that versioned PURLs get both badges, versioned first."""
    badges = get_badges("pkg:pypi/requests@2.28.0")
    assert [b.label for b in badges] == ["Current version", "Latest"]
    assert badges[0].purl_display == "pkg:pypi/requests@2.28.0"
    assert badges[1].purl_display == "pkg:pypi/requests"


def test_get_badges_scoped() -> None:
    """Test badges for a scoped npm package."""
    badges = get_badges("pkg:npm/@angular/core@15.0.0")
    assert [b.purl_display for b in badges] == ["pkg:npm/@angular/core@15.0.0", "pkg:npm/@angular/core"]
