"""Description of the operating system the packages are installed on."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from enum import Enum


class OsFamily(str, Enum):
    """The operating system families that matter for R packages."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"


@dataclass(frozen=True)
class OsType:
    """An OS family, plus the distribution for Linux or the system name for others."""

    kind: OsFamily
    detail: str = ""

    @classmethod
    def windows(cls) -> OsType:
        return cls(OsFamily.WINDOWS)

    @classmethod
    def macos(cls) -> OsType:
        return cls(OsFamily.MACOS)

    @classmethod
    def linux(cls, distrib: str = "") -> OsType:
        return cls(OsFamily.LINUX, distrib)

    @classmethod
    def other(cls, name: str) -> OsType:
        return cls(OsFamily.OTHER, name)

    @property
    def distrib(self) -> str:
        """The Linux distribution name, empty for other families."""
        return self.detail if self.kind is OsFamily.LINUX else ""

    def family(self) -> str:
        return self.kind.value

    def tarball_extension(self) -> str:
        if self.kind is OsFamily.WINDOWS:
            return "zip"
        if self.kind is OsFamily.MACOS:
            return "tgz"
        return "tar.gz"


# os-release ID values mapped to the distribution names used elsewhere.
_LINUX_DISTRIBS = {
    "ubuntu": "ubuntu",
    "fedora": "fedora",
    "arch": "arch",
    "amzn": "amazon",
    "debian": "debian",
    "pop": "pop",
    "centos": "centos",
    "opensuse": "opensuse",
    "opensuse-leap": "opensuse",
    "opensuse-tumbleweed": "opensuse",
    "rhel": "redhat",
    "rocky": "rocky",
    "sles": "suse",
    "sle": "suse",
}

_UNKNOWN_VERSION = "Unknown"


@dataclass
class SystemInfo:
    """The OS type, version, codename and architecture of a machine."""

    os_type: OsType
    version: str
    codename: str | None = None
    arch: str | None = None

    @classmethod
    def from_os_info(cls) -> SystemInfo:
        """Detect the information of the running machine."""
        system = platform.system()
        arch = platform.machine() or None
        codename = None

        if system == "Windows":
            os_type = OsType.windows()
            version = platform.version() or _UNKNOWN_VERSION
        elif system == "Darwin":
            os_type = OsType.macos()
            version = platform.mac_ver()[0] or _UNKNOWN_VERSION
        elif system == "Linux":
            try:
                release = platform.freedesktop_os_release()
            except OSError:
                release = {}
            os_type = OsType.linux(_LINUX_DISTRIBS.get(release.get("ID", "").lower(), ""))
            version = release.get("VERSION_ID") or _UNKNOWN_VERSION
            codename = release.get("VERSION_CODENAME") or release.get("UBUNTU_CODENAME") or None
        else:
            os_type = OsType.other(system)
            version = platform.release() or _UNKNOWN_VERSION

        return cls(os_type=os_type, version=version, codename=codename, arch=arch)

    def os_family(self) -> str:
        return self.os_type.family()

    def sysreq_data(self) -> tuple[str, str]:
        """Return the (distribution name, version) pair used by the sysreqs API."""
        if self.os_type.kind is not OsFamily.LINUX:
            return "invalid", ""

        distrib = self.os_type.distrib
        if distrib == "suse":
            return "sle", self.version
        if distrib == "ubuntu":
            parts = self.version.split(".")
            try:
                year, month = int(parts[0]), int(parts[1])
            except (IndexError, ValueError):
                raise ValueError(f"Ubuntu version {self.version!r} is not of the form YY.MM") from None
            return distrib, f"{year}.{month:02d}"
        return distrib, self.version