"""PURL model and helpers."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

# All 38 official package types from the purl-spec.
VALID_PURL_TYPES: Tuple[str, ...] = (
    "alpm", "apk", "bazel", "bitbucket", "bitnami",
    "cargo", "cocoapods", "composer", "conan", "conda",
    "cpan", "cran", "deb", "docker", "gem",
    "generic", "github", "golang", "hackage", "hex",
    "huggingface", "julia", "luarocks", "maven", "mlflow",
    "npm", "nuget", "oci", "opam", "otp",
    "pub", "pypi", "qpkg", "rpm", "swid",
    "swift", "vscode-extension", "yocto",
)


class PackageURL(BaseModel):
    """Represents a decoded Package URL (purl).

    A purl is a URI that represents a software package in a mostly
    unambiguous way.
    See: https://github.com/package-url/purl-spec

    Instances are immutable. Optional components are None when absent;
    an empty qualifiers mapping is never stored.

    Attributes:
        type: The package "type" or package management system.
        namespace: Some name prefix such as a Maven groupid, a Docker image owner, etc.
        name: The name of the package.
        version: The version of the package.
        qualifiers: Extra qualifying data for a package such as an OS, architecture, etc.
        subpath: Extra subpath within a package, relative to the package root.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    namespace: Optional[str] = None
    name: str
    version: Optional[str] = None
    qualifiers: Optional[Dict[str, str]] = None
    subpath: Optional[str] = None

    def qualifier(self, key: str) -> Optional[str]:
        """Returns a qualifier value, or None when it is absent or empty."""
        if not self.qualifiers:
            return None
        return self.qualifiers.get(key) or None

    def components(self) -> List[Tuple[str, str]]:
        """Returns (label, value) rows for the components that are present.

        Rows come in display order: Type, Namespace, Name, Version,
        Qualifiers, Subpath.
        """
        rows = [("Type", self.type)]
        if self.namespace:
            rows.append(("Namespace", self.namespace))
        rows.append(("Name", self.name))
        if self.version:
            rows.append(("Version", self.version))
        if self.qualifiers:
            qualifiers_str = ", ".join(f"{k}={v}" for k, v in self.qualifiers.items())
            rows.append(("Qualifiers", qualifiers_str))
        if self.subpath:
            rows.append(("Subpath", self.subpath))
        return rows
