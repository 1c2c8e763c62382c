"""Tests for registry mappings and URL generation."""
import pytest

from purlviewer.parser import parse_purl
from purlviewer.purl import VALID_PURL_TYPES, PackageURL
from purlviewer.registry import (
    REGISTRY_MAPPINGS,
    RegistryMapping,
    get_registry_mapping,
    get_registry_url,
)


def _purl(purl_type: str, name: str, namespace=None, version=None, qualifiers=None) -> PackageURL:
    return PackageURL(type=purl_type, name=name, namespace=namespace, version=version, qualifiers=qualifiers)


@pytest.mark.parametrize(
    "purl, expected_url",
    [
        (_purl("npm", "lodash", version="4.17.21"), "https://www.npmjs.com/package/lodash/v/4.17.21"),
        (_purl("npm", "lodash"), "https://www.npmjs.com/package/lodash"),
        (_purl("npm", "node", namespace="@types", version="18.0.0"), "https://www.npmjs.com/package/@types/node/v/18.0.0"),
        (_purl("npm", "core", namespace="angular"), "https://www.npmjs.com/package/@angular/core"),
        (_purl("pypi", "requests", version="2.28.0"), "https://pypi.org/project/requests/2.28.0/"),
        (_purl("pypi", "django"), "https://pypi.org/project/django/"),
        (_purl("maven", "commons-lang3", namespace="org.apache.commons", version="3.12.0"),
         "https://central.sonatype.com/artifact/org.apache.commons/commons-lang3/3.12.0"),
        (_purl("maven", "commons-lang3", namespace="org.apache.commons"),
         "https://central.sonatype.com/artifact/org.apache.commons/commons-lang3"),
        (_purl("maven", "guava"), "https://central.sonatype.com/search?q=guava"),
        (_purl("cargo", "serde", version="1.0.152"), "https://crates.io/crates/serde/1.0.152"),
        (_purl("cargo", "serde"), "https://crates.io/crates/serde"),
        (_purl("gem", "rails", version="7.0.4"), "https://rubygems.org/gems/rails/versions/7.0.4"),
        (_purl("gem", "rails"), "https://rubygems.org/gems/rails"),
        (_purl("nuget", "Newtonsoft.Json", version="13.0.1"), "https://www.nuget.org/packages/Newtonsoft.Json/13.0.1"),
        (_purl("golang", "gin", namespace="github.com/gin-gonic", version="v1.9.0"),
         "https://pkg.go.dev/github.com/gin-gonic/gin@v1.9.0"),
        (_purl("golang", "errors"), "https://pkg.go.dev/errors"),
        (_purl("docker", "nginx", namespace="library", version="1.23"), "https://hub.docker.com/_/nginx"),
        (_purl("docker", "nginx"), "https://hub.docker.com/_/nginx"),
        (_purl("docker", "postgresql", namespace="bitnami", version="15"), "https://hub.docker.com/r/bitnami/postgresql"),
        (_purl("github", "linux", namespace="torvalds"), "https://github.com/torvalds/linux"),
        (_purl("bitbucket", "aui", namespace="atlassian"), "https://bitbucket.org/atlassian/aui"),
        (_purl("huggingface", "DialoGPT-medium", namespace="microsoft"), "https://huggingface.co/microsoft/DialoGPT-medium"),
        (_purl("huggingface", "bert"), "https://huggingface.co/models?search=bert"),
        (_purl("hex", "phoenix", version="1.7.0"), "https://hex.pm/packages/phoenix/1.7.0"),
        (_purl("pub", "flutter", version="3.0.0"), "https://pub.dev/packages/flutter"),
        (_purl("composer", "framework", namespace="laravel", version="10.0.0"), "https://packagist.org/packages/laravel/framework"),
        (_purl("composer", "framework"), "https://packagist.org/?query=framework"),
        (_purl("cocoapods", "Alamofire", version="5.6.0"), "https://cocoapods.org/pods/Alamofire"),
        (_purl("hackage", "aeson", version="2.1.0.0"), "https://hackage.haskell.org/package/aeson"),
        (_purl("cran", "ggplot2", version="3.4.0"), "https://cran.r-project.org/package=ggplot2"),
        (_purl("cpan", "Mojolicious", version="9.27"), "https://metacpan.org/pod/Mojolicious"),
        (_purl("cpan", "Mojolicious", namespace="SRI"), "https://metacpan.org/release/SRI/Mojolicious"),
        (_purl("opam", "core", version="0.15.0"), "https://opam.ocaml.org/packages/core/"),
        (_purl("swift", "swift-nio", namespace="apple", version="2.50.0"), "https://swiftpackageindex.com/apple/swift-nio"),
        (_purl("julia", "DataFrames", version="1.5.0"), "https://juliahub.com/ui/Packages/General/DataFrames"),
        (_purl("julia", "Plots.jl"), "https://juliahub.com/ui/Packages/General/Plots"),
        (_purl("luarocks", "luasocket", namespace="lunarmodules", version="3.1.0"),
         "https://luarocks.org/modules/lunarmodules/luasocket"),
        (_purl("luarocks", "luasocket"), "https://luarocks.org/search?q=luasocket"),
        (_purl("bazel", "rules_go", version="0.39.0"), "https://registry.bazel.build/modules/rules_go"),
        (_purl("conan", "boost", version="1.81.0"), "https://conan.io/center/recipes/boost"),
        (_purl("conda", "numpy", namespace="conda-forge", version="1.24.0"), "https://anaconda.org/conda-forge/numpy"),
        (_purl("conda", "numpy"), "https://anaconda.org/anaconda/numpy"),
        (_purl("bitnami", "wordpress", version="6.1.1"), "https://bitnami.com/stack/wordpress"),
        (_purl("vscode-extension", "python", namespace="ms-python", version="2023.1.0"),
         "https://marketplace.visualstudio.com/items?itemName=ms-python.python"),
        (_purl("alpm", "pacman", namespace="arch", version="6.0.2"), "https://archlinux.org/packages/?q=pacman"),
        (_purl("alpm", "pacman", qualifiers={"repository_url": "https://mirror.example/arch"}), "https://mirror.example/arch"),
        (_purl("apk", "openssl", namespace="alpine", version="3.0.8"), "https://pkgs.alpinelinux.org/packages?name=openssl"),
        (_purl("deb", "curl", namespace="debian", version="7.88.1"), "https://packages.debian.org/sid/curl"),
        (_purl("deb", "curl", qualifiers={"distro": "bookworm"}), "https://packages.debian.org/bookworm/curl"),
        (_purl("deb", "curl", qualifiers={"distro": "bookworm", "repository_url": "https://deb.example"}), "https://deb.example"),
        (_purl("rpm", "httpd", namespace="fedora", version="2.4.54"), "https://packages.fedoraproject.org/pkgs/httpd/"),
        (_purl("oci", "debian", qualifiers={"repository_url": "docker.io/library/debian"}), "docker.io/library/debian"),
    ],
)
def test_registry_urls(purl: PackageURL, expected_url: str) -> None:
    """Test the per-type URL derivation rules."""
    result = get_registry_url(purl)
    assert result.url == expected_url
    assert result.has_registry is True
    assert result.message is None


@pytest.mark.parametrize("purl_type", ["github", "bitbucket", "swift", "vscode-extension"])
def test_types_requiring_namespace_have_no_url_without_one(purl_type: str) -> None:
    """Test that namespace-less PURLs of these types produce no link."""
    result = get_registry_url(_purl(purl_type, "repo"))
    assert result.url is None
    assert result.has_registry is True


def test_oci_without_repository_url_requires_qualifier() -> None:
    """Test the qualifier message for qualifier-only registries."""
    result = get_registry_url(_purl("oci", "debian"))
    assert result.url is None
    assert result.registry_name == "OCI Registry"
    assert result.has_registry is True
    assert result.message == (
        "OCI Registry packages require a repository_url or distro qualifier for direct linking."
    )


@pytest.mark.parametrize("purl_type", ["mlflow", "otp", "qpkg", "swid", "yocto"])
def test_types_without_registry_use_repository_or_vcs_url(purl_type: str) -> None:
    """Test the repository_url / vcs_url fallbacks of registry-less types."""
    mapping = REGISTRY_MAPPINGS[purl_type]
    message = f"{mapping.registry_name} packages do not have a central browsable registry."

    bare = get_registry_url(_purl(purl_type, "thing"))
    assert bare.url is None
    assert bare.has_registry is False
    assert bare.message == message

    vcs = get_registry_url(_purl(purl_type, "thing", qualifiers={"vcs_url": "https://git.example/thing"}))
    assert vcs.url == "https://git.example/thing"
    assert vcs.message == message

    both = get_registry_url(_purl(purl_type, "thing", qualifiers={
        "vcs_url": "https://git.example/thing",
        "repository_url": "https://repo.example/thing",
    }))
    assert both.url == "https://repo.example/thing"


def test_generic_uses_download_url() -> None:
    """Test that generic PURLs link to their download_url only."""
    assert get_registry_url(_purl("generic", "mypackage", version="1.0.0")).url is None
    result = get_registry_url(_purl("generic", "openssl", qualifiers={"download_url": "https://openssl.org/openssl.tgz"}))
    assert result.url == "https://openssl.org/openssl.tgz"
    assert result.registry_name == "Generic"
    assert result.has_registry is False
    assert result.message == "Generic packages do not have a central browsable registry."


def test_unknown_type_is_reported_not_raised() -> None:
    """Test that the resolver is total over unknown types."""
    result = get_registry_url(_purl("foobar", "x"))
    assert result.url is None
    assert result.registry_name == "Unknown"
    assert result.has_registry is False
    assert result.message == "Unknown package type: foobar"


def test_every_known_type_has_a_mapping() -> None:
    """Test that the mapping table covers exactly the official types."""
    assert set(REGISTRY_MAPPINGS) == set(VALID_PURL_TYPES)
    for purl_type in VALID_PURL_TYPES:
        mapping = get_registry_mapping(purl_type)
        assert isinstance(mapping, RegistryMapping)
        assert mapping.type == purl_type
    assert get_registry_mapping("foobar") is None


def test_mapping_table_is_read_only() -> None:
    """Test that the mapping table cannot be modified."""
    with pytest.raises(TypeError):
        REGISTRY_MAPPINGS["npm"] = REGISTRY_MAPPINGS["pypi"]


def test_resolve_is_pure() -> None:
    """Test that equal input gives equal output."""
    first = get_registry_url(_purl("deb", "curl", qualifiers={"distro": "bookworm"}))
    second = get_registry_url(_purl("deb", "curl", qualifiers={"distro": "bookworm"}))
    assert first == second


@pytest.mark.parametrize(
    "raw, expected_url",
    [
        ("pkg:npm/lodash@4.17.21", "https://www.npmjs.com/package/lodash/v/4.17.21"),
        ("pkg:npm/%40vue/core@3.2.0", "https://www.npmjs.com/package/@vue/core/v/3.2.0"),
        ("pkg:maven/org.apache.commons/commons-lang3", "https://central.sonatype.com/artifact/org.apache.commons/commons-lang3"),
        ("pkg:deb/debian/curl@7.88.1?distro=bookworm", "https://packages.debian.org/bookworm/curl"),
        ("pkg:github/lodash/lodash@4.17.21#core", "https://github.com/lodash/lodash"),
        ("pkg:generic/mypackage@1.0.0", None),
    ],
)
def test_parse_then_resolve(raw: str, expected_url) -> None:
    """Test registry URLs for parsed PURL strings."""
    result = parse_purl(raw)
    assert result.success
    assert get_registry_url(result.purl).url == expected_url
