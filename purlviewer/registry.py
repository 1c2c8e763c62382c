"""Registry mappings and browsable URL generation for parsed PURLs."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .purl import PackageURL


class RegistryMapping(BaseModel):
    """Static registry information for one PURL type.

    Attributes:
        type: The PURL type this mapping belongs to.
        registry_name: Display name of the registry.
        base_url: Registry home page, or None when there is no central registry.
        has_registry: Whether the type has a central browsable registry.
        requires_qualifier: Whether direct links need a qualifier such as
            repository_url or distro.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    registry_name: str
    base_url: Optional[str] = None
    has_registry: bool
    requires_qualifier: bool = False


class RegistryResult(BaseModel):
    """The registry link for a PURL, or the reason there is none."""

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    registry_name: str
    has_registry: bool
    message: Optional[str] = None


def _mapping(type: str, registry_name: str, base_url: Optional[str], has_registry: bool,
             requires_qualifier: bool = False) -> RegistryMapping:
    return RegistryMapping(type=type, registry_name=registry_name, base_url=base_url,
                           has_registry=has_registry, requires_qualifier=requires_qualifier)


REGISTRY_MAPPINGS: Mapping[str, RegistryMapping] = MappingProxyType({
    m.type: m for m in (
        # Types with central registries
        _mapping("bazel", "Bazel Central Registry", "https://registry.bazel.build", True),
        _mapping("bitbucket", "Bitbucket", "https://bitbucket.org", True),
        _mapping("bitnami", "Bitnami", "https://bitnami.com", True),
        _mapping("cargo", "crates.io", "https://crates.io", True),
        _mapping("cocoapods", "CocoaPods", "https://cocoapods.org", True),
        _mapping("composer", "Packagist", "https://packagist.org", True),
        _mapping("conan", "Conan Center", "https://conan.io/center", True),
        _mapping("conda", "Anaconda", "https://anaconda.org", True),
        _mapping("cpan", "MetaCPAN", "https://metacpan.org", True),
        _mapping("cran", "CRAN", "https://cran.r-project.org", True),
        _mapping("docker", "Docker Hub", "https://hub.docker.com", True),
        _mapping("gem", "RubyGems", "https://rubygems.org", True),
        _mapping("github", "GitHub", "https://github.com", True),
        _mapping("golang", "Go Packages", "https://pkg.go.dev", True),
        _mapping("hackage", "Hackage", "https://hackage.haskell.org", True),
        _mapping("hex", "Hex.pm", "https://hex.pm", True),
        _mapping("huggingface", "Hugging Face", "https://huggingface.co", True),
        _mapping("julia", "JuliaHub", "https://juliahub.com", True),
        _mapping("luarocks", "LuaRocks", "https://luarocks.org", True),
        _mapping("maven", "Maven Central", "https://central.sonatype.com", True),
        _mapping("npm", "npm", "https://www.npmjs.com", True),
        _mapping("nuget", "NuGet", "https://www.nuget.org", True),
        _mapping("opam", "OPAM", "https://opam.ocaml.org", True),
        _mapping("pub", "pub.dev", "https://pub.dev", True),
        _mapping("pypi", "PyPI", "https://pypi.org", True),
        _mapping("swift", "Swift Package Index", "https://swiftpackageindex.com", True),
        _mapping("vscode-extension", "VS Marketplace", "https://marketplace.visualstudio.com", True),

        # Types requiring qualifiers
        _mapping("alpm", "Arch Linux", None, True, requires_qualifier=True),
        _mapping("apk", "Alpine Linux", None, True, requires_qualifier=True),
        _mapping("deb", "Debian/Ubuntu", None, True, requires_qualifier=True),
        _mapping("oci", "OCI Registry", None, True, requires_qualifier=True),
        _mapping("rpm", "RPM", None, True, requires_qualifier=True),
        _mapping("yocto", "Yocto", None, False, requires_qualifier=True),

        # Types without browsable registry
        _mapping("generic", "Generic", None, False),
        _mapping("mlflow", "MLflow", None, False),
        _mapping("otp", "Erlang/OTP", None, False),
        _mapping("qpkg", "QNX", None, False),
        _mapping("swid", "SWID", None, False),
    )
})


def _npm(purl: PackageURL) -> Optional[str]:
    if purl.namespace:
        scope = purl.namespace if purl.namespace.startswith("@") else f"@{purl.namespace}"
        package = f"{scope}/{purl.name}"
    else:
        package = purl.name
    if purl.version:
        return f"https://www.npmjs.com/package/{package}/v/{purl.version}"
    return f"https://www.npmjs.com/package/{package}"


def _pypi(purl: PackageURL) -> Optional[str]:
    if purl.version:
        return f"https://pypi.org/project/{purl.name}/{purl.version}/"
    return f"https://pypi.org/project/{purl.name}/"


def _maven(purl: PackageURL) -> Optional[str]:
    # namespace is the groupId
    if not purl.namespace:
        return f"https://central.sonatype.com/search?q={purl.name}"
    url = f"https://central.sonatype.com/artifact/{purl.namespace}/{purl.name}"
    return f"{url}/{purl.version}" if purl.version else url


def _cargo(purl: PackageURL) -> Optional[str]:
    url = f"https://crates.io/crates/{purl.name}"
    return f"{url}/{purl.version}" if purl.version else url


def _gem(purl: PackageURL) -> Optional[str]:
    url = f"https://rubygems.org/gems/{purl.name}"
    return f"{url}/versions/{purl.version}" if purl.version else url


def _nuget(purl: PackageURL) -> Optional[str]:
    url = f"https://www.nuget.org/packages/{purl.name}"
    return f"{url}/{purl.version}" if purl.version else url


def _golang(purl: PackageURL) -> Optional[str]:
    module_path = f"{purl.namespace}/{purl.name}" if purl.namespace else purl.name
    url = f"https://pkg.go.dev/{module_path}"
    return f"{url}@{purl.version}" if purl.version else url


def _docker(purl: PackageURL) -> Optional[str]:
    # Official images live under the "library" namespace.
    if not purl.namespace or purl.namespace == "library":
        return f"https://hub.docker.com/_/{purl.name}"
    return f"https://hub.docker.com/r/{purl.namespace}/{purl.name}"


def _github(purl: PackageURL) -> Optional[str]:
    if not purl.namespace:
        return None
    return f"https://github.com/{purl.namespace}/{purl.name}"


def _bitbucket(purl: PackageURL) -> Optional[str]:
    if not purl.namespace:
        return None
    return f"https://bitbucket.org/{purl.namespace}/{purl.name}"


def _huggingface(purl: PackageURL) -> Optional[str]:
    if not purl.namespace:
        return f"https://huggingface.co/models?search={purl.name}"
    return f"https://huggingface.co/{purl.namespace}/{purl.name}"


def _hex(purl: PackageURL) -> Optional[str]:
    url = f"https://hex.pm/packages/{purl.name}"
    return f"{url}/{purl.version}" if purl.version else url


def _pub(purl: PackageURL) -> Optional[str]:
    return f"https://pub.dev/packages/{purl.name}"


def _composer(purl: PackageURL) -> Optional[str]:
    if not purl.namespace:
        return f"https://packagist.org/?query={purl.name}"
    return f"https://packagist.org/packages/{purl.namespace}/{purl.name}"


def _cocoapods(purl: PackageURL) -> Optional[str]:
    return f"https://cocoapods.org/pods/{purl.name}"


def _hackage(purl: PackageURL) -> Optional[str]:
    return f"https://hackage.haskell.org/package/{purl.name}"


def _cran(purl: PackageURL) -> Optional[str]:
    return f"https://cran.r-project.org/package={purl.name}"


def _cpan(purl: PackageURL) -> Optional[str]:
    if purl.namespace:
        return f"https://metacpan.org/release/{purl.namespace}/{purl.name}"
    return f"https://metacpan.org/pod/{purl.name}"


def _opam(purl: PackageURL) -> Optional[str]:
    return f"https://opam.ocaml.org/packages/{purl.name}/"


def _swift(purl: PackageURL) -> Optional[str]:
    if not purl.namespace:
        return None
    return f"https://swiftpackageindex.com/{purl.namespace}/{purl.name}"


def _julia(purl: PackageURL) -> Optional[str]:
    name = purl.name[:-len(".jl")] if purl.name.endswith(".jl") else purl.name
    return f"https://juliahub.com/ui/Packages/General/{name}"


def _luarocks(purl: PackageURL) -> Optional[str]:
    if not purl.namespace:
        return f"https://luarocks.org/search?q={purl.name}"
    return f"https://luarocks.org/modules/{purl.namespace}/{purl.name}"


def _bazel(purl: PackageURL) -> Optional[str]:
    return f"https://registry.bazel.build/modules/{purl.name}"


def _conan(purl: PackageURL) -> Optional[str]:
    return f"https://conan.io/center/recipes/{purl.name}"


def _conda(purl: PackageURL) -> Optional[str]:
    # namespace is the channel
    channel = purl.namespace or "anaconda"
    return f"https://anaconda.org/{channel}/{purl.name}"


def _bitnami(purl: PackageURL) -> Optional[str]:
    return f"https://bitnami.com/stack/{purl.name}"


def _vscode_extension(purl: PackageURL) -> Optional[str]:
    # namespace is the publisher
    if not purl.namespace:
        return None
    return f"https://marketplace.visualstudio.com/items?itemName={purl.namespace}.{purl.name}"


def _alpm(purl: PackageURL) -> Optional[str]:
    return purl.qualifier("repository_url") or f"https://archlinux.org/packages/?q={purl.name}"


def _apk(purl: PackageURL) -> Optional[str]:
    return purl.qualifier("repository_url") or f"https://pkgs.alpinelinux.org/packages?name={purl.name}"


def _deb(purl: PackageURL) -> Optional[str]:
    repository_url = purl.qualifier("repository_url")
    if repository_url:
        return repository_url
    distro = purl.qualifier("distro") or "sid"
    return f"https://packages.debian.org/{distro}/{purl.name}"


def _rpm(purl: PackageURL) -> Optional[str]:
    return purl.qualifier("repository_url") or f"https://packages.fedoraproject.org/pkgs/{purl.name}/"


def _oci(purl: PackageURL) -> Optional[str]:
    return purl.qualifier("repository_url")


def _generic(purl: PackageURL) -> Optional[str]:
    return purl.qualifier("download_url")


def _repository_or_vcs(purl: PackageURL) -> Optional[str]:
    return purl.qualifier("repository_url") or purl.qualifier("vcs_url")


URL_HANDLERS: Mapping[str, Callable[[PackageURL], Optional[str]]] = MappingProxyType({
    "npm": _npm,
    "pypi": _pypi,
    "maven": _maven,
    "cargo": _cargo,
    "gem": _gem,
    "nuget": _nuget,
    "golang": _golang,
    "docker": _docker,
    "github": _github,
    "bitbucket": _bitbucket,
    "huggingface": _huggingface,
    "hex": _hex,
    "pub": _pub,
    "composer": _composer,
    "cocoapods": _cocoapods,
    "hackage": _hackage,
    "cran": _cran,
    "cpan": _cpan,
    "opam": _opam,
    "swift": _swift,
    "julia": _julia,
    "luarocks": _luarocks,
    "bazel": _bazel,
    "conan": _conan,
    "conda": _conda,
    "bitnami": _bitnami,
    "vscode-extension": _vscode_extension,
    "alpm": _alpm,
    "apk": _apk,
    "deb": _deb,
    "rpm": _rpm,
    "oci": _oci,
    "generic": _generic,
    "mlflow": _repository_or_vcs,
    "otp": _repository_or_vcs,
    "qpkg": _repository_or_vcs,
    "swid": _repository_or_vcs,
    "yocto": _repository_or_vcs,
})


def generate_url(purl: PackageURL) -> Optional[str]:
    """Derives the browsable URL for a PURL, or None when none can be built.

    Path segments are inserted as-is; these are navigation URLs, not
    transport URLs.
    """
    handler = URL_HANDLERS.get(purl.type)
    if handler is None:
        return None
    return handler(purl)


def get_registry_url(purl: PackageURL) -> RegistryResult:
    """Gets registry information and the browsable URL for a parsed PURL.

    Never fails: when no link can be built, `url` is None and `message`
    explains why.

    Args:
        purl: A parsed PackageURL.

    Returns:
        A RegistryResult for the PURL's type.
    """
    mapping = REGISTRY_MAPPINGS.get(purl.type)
    if mapping is None:
        return RegistryResult(
            url=None,
            registry_name="Unknown",
            has_registry=False,
            message=f"Unknown package type: {purl.type}",
        )

    url = generate_url(purl)

    if not mapping.has_registry:
        return RegistryResult(
            url=url,
            registry_name=mapping.registry_name,
            has_registry=False,
            message=f"{mapping.registry_name} packages do not have a central browsable registry.",
        )

    if mapping.requires_qualifier and not url:
        return RegistryResult(
            url=None,
            registry_name=mapping.registry_name,
            has_registry=True,
            message=(
                f"{mapping.registry_name} packages require a repository_url "
                f"or distro qualifier for direct linking."
            ),
        )

    return RegistryResult(url=url, registry_name=mapping.registry_name, has_registry=True)


def get_registry_mapping(purl_type: str) -> Optional[RegistryMapping]:
    """Returns the registry mapping for a PURL type, or None if unknown."""
    return REGISTRY_MAPPINGS.get(purl_type)
