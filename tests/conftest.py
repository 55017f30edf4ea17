"""Shared test fixtures for vulnbench tests.

Provides the bundled fixture bytes, a generator for reports of any shape and
writers that put a generated report on disk in all three formats.
"""

import json
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

import pytest
import yaml

from vulnbench.bindings import ENGINES
from vulnbench.fixtures import DEFAULT_DATA_DIR, load_fixtures
from vulnbench.models import VARIANTS

FORMATS = ("json", "yaml", "xml")


# =============================================================================
# Report generation
# =============================================================================

def make_report_data(packages: int, cves: int, releases: int) -> dict[str, Any]:
    """Build a report in wire form with the given number of entries per level."""
    return {
        "packages": [
            {
                "package": f"pkg-{p}",
                "cves": [
                    {
                        "cve_id": f"CVE-2024-{p:02d}{c:03d}",
                        "description": f"Issue {c} in pkg-{p}",
                        "scope": "remote" if c % 2 else "local",
                        "releases": [
                            {
                                "releaseName": f"release-{r}",
                                "status": "resolved",
                                "fixed_version": f"1.{p}.{c}-{r}",
                                "urgency": "medium",
                            }
                            for r in range(releases)
                        ],
                    }
                    for c in range(cves)
                ],
            }
            for p in range(packages)
        ]
    }


def count_report_tree(report: Any) -> tuple[int, int, int]:
    """Count (packages, cves, releases) in a decoded report of either variant."""
    packages = report.packages
    cves = [cve for package in packages for cve in package.cves]
    releases = sum(len(cve.releases) for cve in cves)
    return len(packages), len(cves), releases


def report_to_xml(data: dict[str, Any]) -> bytes:
    root = ET.Element("VulnerabilityReport")
    for package in data["packages"]:
        package_el = ET.SubElement(root, "packages")
        ET.SubElement(package_el, "package").text = package["package"]
        for cve in package["cves"]:
            cve_el = ET.SubElement(package_el, "cves")
            for key in ("cve_id", "description", "scope"):
                ET.SubElement(cve_el, key).text = cve[key]
            for release in cve["releases"]:
                release_el = ET.SubElement(cve_el, "releases")
                for key in ("releaseName", "status", "fixed_version", "urgency"):
                    ET.SubElement(release_el, key).text = release[key]
    return ET.tostring(root, encoding="utf-8")


def write_fixtures(directory: Path, data: dict[str, Any]) -> Path:
    """Write ``data`` as debian_vulns.{json,yaml,xml} into ``directory``."""
    (directory / "debian_vulns.json").write_text(json.dumps(data), encoding="utf-8")
    (directory / "debian_vulns.yaml").write_text(
        yaml.safe_dump(data, sort_keys=False), encoding="utf-8"
    )
    (directory / "debian_vulns.xml").write_bytes(report_to_xml(data))
    return directory


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def bundled() -> dict[str, bytes]:
    """Raw bytes of the fixtures shipped with the package."""
    return load_fixtures(DEFAULT_DATA_DIR, FORMATS)


@pytest.fixture(params=ENGINES)
def engine(request) -> str:
    return request.param


@pytest.fixture(params=list(VARIANTS))
def variant(request) -> str:
    return request.param


@pytest.fixture(params=FORMATS)
def fmt(request) -> str:
    return request.param


@pytest.fixture
def small_data_dir(tmp_path) -> Path:
    """A data directory holding a 2x2x2 report in every format."""
    return write_fixtures(tmp_path, make_report_data(2, 2, 2))


@pytest.fixture
def make_report():
    """Factory fixture: make_report(packages, cves, releases) -> wire-form dict."""
    return make_report_data


@pytest.fixture
def count_tree():
    """Helper fixture: count_tree(report) -> (packages, cves, releases)."""
    return count_report_tree


@pytest.fixture
def write_report(tmp_path):
    """Factory fixture: write_report(data) -> data dir holding all three formats."""

    def _write(data: dict[str, Any]) -> Path:
        return write_fixtures(tmp_path, data)

    return _write
