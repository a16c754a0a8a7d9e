"""System requirements of R packages and their installation status."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import urllib.request
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .system_info import SystemInfo

logger = logging.getLogger(__name__)

SYSTEM_REQ_API_URL = "https://packagemanager.posit.co/__api__/repos/cran/sysreqs"
SYS_REQ_URL_ENV_VAR = "RV_SYS_REQ_URL"


class SysInstallationStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass
class SysDep:
    """A system dependency and whether it is installed."""

    name: str
    status: SysInstallationStatus = field(default=SysInstallationStatus.UNKNOWN)


def is_supported(system_info: SystemInfo) -> bool:
    """Whether the sysreqs API knows the distribution and release."""
    distrib, version = system_info.sysreq_data()
    if distrib == "ubuntu":
        return version in ("20.04", "22.04", "24.04")
    if distrib == "debian":
        return version.startswith("12")
    if distrib == "centos":
        return version.startswith(("7", "8"))
    if distrib == "redhat":
        return version.startswith(("7", "8", "9"))
    if distrib == "rockylinux":
        return version.startswith("9")
    if distrib in ("opensuse", "sle"):
        return version.startswith("15")
    return False


def parse_requirements(content: str) -> dict[str, list[str]]:
    """Parse a sysreqs API response into a mapping of R package to system packages."""
    try:
        data = json.loads(content)
        return {
            package["name"]: list(package["requirements"].get("packages", []))
            for package in data["requirements"]
        }
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid system requirements response: {exc}") from exc


def _with_query(url: str, pairs: list[tuple[str, str]]) -> str:
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True) + pairs
    return urlunsplit(parts._replace(query=urlencode(query)))


def get_system_requirements(
    system_info: SystemInfo, url: str | None = None
) -> dict[str, list[str]]:
    """Fetch the system requirements of every package for this Linux distribution."""
    base = url or os.environ.get(SYS_REQ_URL_ENV_VAR, SYSTEM_REQ_API_URL)
    distrib, version = system_info.sysreq_data()
    full_url = _with_query(
        base, [("all", "true"), ("distribution", distrib), ("release", version)]
    )
    logger.debug("Getting sysreq data from %s", full_url)

    request = urllib.request.Request(full_url, headers={"Accept": "application/json"})
    with urllib.request.urlopen(request) as response:
        content = response.read().decode("utf-8")
    return parse_requirements(content)


def check_installation_status(
    system_info: SystemInfo, sys_deps: Iterable[str]
) -> dict[str, SysInstallationStatus]:
    """Find out which of the system dependencies are installed."""
    if not is_supported(system_info):
        return {}

    status = {name: SysInstallationStatus.UNKNOWN for name in sys_deps}
    if not status:
        return status

    logger.debug("Checking installation status for %s", sorted(status))

    if system_info.sysreq_data()[0] in ("ubuntu", "debian"):
        completed = subprocess.run(
            ["dpkg-query", "-W", "-f=${Package}\n", *sorted(status)],
            capture_output=True,
            text=True,
            check=False,
        )
        for line in completed.stdout.splitlines():
            name = line.strip()
            if name in status:
                status[name] = SysInstallationStatus.PRESENT

    return {
        name: SysInstallationStatus.ABSENT if value is SysInstallationStatus.UNKNOWN else value
        for name, value in status.items()
    }