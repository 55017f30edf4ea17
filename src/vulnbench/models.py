"""
Vulnerability report models in two variants.

Annotated: every field declares its external name with ``Field(alias=...)``,
so attribute names stay Pythonic while the wire names stay fixed across
JSON, YAML and XML.

Unannotated: no aliases. The attribute name is the external name in every
format, so the attributes are spelled exactly like the wire names.

Both variants read the same fixtures and forbid unknown keys.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

# =============================================================================
# Annotated variant
# =============================================================================


class Release(BaseModel):
    """Fix status of a CVE in one Debian release."""

    model_config = ConfigDict(extra="forbid")

    release_name: str = Field(alias="releaseName")
    status: str = Field(alias="status")
    fixed_version: str = Field(alias="fixed_version")
    urgency: str = Field(alias="urgency")


class CVE(BaseModel):
    """A CVE affecting a package."""

    model_config = ConfigDict(extra="forbid")

    cve_id: str = Field(alias="cve_id")
    description: str = Field(alias="description")
    scope: str = Field(alias="scope")
    releases: list[Release] = Field(alias="releases")


class Package(BaseModel):
    """A source package and its CVEs."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(alias="package")
    cves: list[CVE] = Field(alias="cves")


class VulnerabilityReport(BaseModel):
    """Root of the annotated tree."""

    model_config = ConfigDict(extra="forbid")

    packages: list[Package] = Field(alias="packages")


# =============================================================================
# Unannotated variant
# =============================================================================


class PlainRelease(BaseModel):
    model_config = ConfigDict(extra="forbid")

    releaseName: str  # noqa: N815
    status: str
    fixed_version: str
    urgency: str


class PlainCVE(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cve_id: str
    description: str
    scope: str
    releases: list[PlainRelease]


class PlainPackage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    package: str
    cves: list[PlainCVE]


class PlainVulnerabilityReport(BaseModel):
    """Root of the unannotated tree."""

    model_config = ConfigDict(extra="forbid")

    packages: list[PlainPackage]


ANNOTATED = "annotated"
UNANNOTATED = "unannotated"

# Variant name -> root model, in report order
VARIANTS: dict[str, type[BaseModel]] = {
    ANNOTATED: VulnerabilityReport,
    UNANNOTATED: PlainVulnerabilityReport,
}


def external_name(field_name: str, field_info: FieldInfo) -> str:
    """Return the name a field carries on the wire: its alias, else its attribute name."""
    return field_info.alias or field_name
