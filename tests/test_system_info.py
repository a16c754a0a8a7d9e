from unittest.mock import patch

import pytest

from rvsync.system_info import OsFamily, OsType, SystemInfo


@pytest.mark.parametrize(
    "os_type, family, extension",
    [
        (OsType.windows(), "windows", "zip"),
        (OsType.macos(), "macos", "tgz"),
        (OsType.linux("ubuntu"), "linux", "tar.gz"),
        (OsType.other("FreeBSD"), "other", "tar.gz"),
    ],
)
def test_family_and_extension(os_type, family, extension):
    assert os_type.family() == family
    assert os_type.tarball_extension() == extension
    assert SystemInfo(os_type, "1").os_family() == family


def test_ubuntu_version_is_zero_padded():
    info = SystemInfo(OsType.linux("ubuntu"), "20.4.0")
    assert info.sysreq_data() == ("ubuntu", "20.04")


def test_ubuntu_version_kept():
    info = SystemInfo(OsType.linux("ubuntu"), "22.04")
    assert info.sysreq_data() == ("ubuntu", "22.04")


def test_ubuntu_invalid_version_raises():
    with pytest.raises(ValueError):
        SystemInfo(OsType.linux("ubuntu"), "rolling").sysreq_data()


def test_suse_maps_to_sle():
    info = SystemInfo(OsType.linux("suse"), "15.5")
    assert info.sysreq_data() == ("sle", "15.5")


def test_other_linux_passes_version():
    info = SystemInfo(OsType.linux("debian"), "12")
    assert info.sysreq_data() == ("debian", "12")


def test_non_linux_is_invalid():
    assert SystemInfo(OsType.windows(), "10").sysreq_data() == ("invalid", "")
    assert SystemInfo(OsType.macos(), "14.1").sysreq_data() == ("invalid", "")


def test_from_os_info_linux():
    release = {"ID": "ubuntu", "VERSION_ID": "22.04", "VERSION_CODENAME": "jammy"}
    with patch("platform.system", return_value="Linux"), patch(
        "platform.freedesktop_os_release", return_value=release
    ), patch("platform.machine", return_value="x86_64"):
        info = SystemInfo.from_os_info()
    assert info.os_type == OsType.linux("ubuntu")
    assert info.version == "22.04"
    assert info.codename == "jammy"
    assert info.arch == "x86_64"


def test_from_os_info_unknown_distribution():
    release = {"ID": "gentoo", "VERSION_ID": "2.15"}
    with patch("platform.system", return_value="Linux"), patch(
        "platform.freedesktop_os_release", return_value=release
    ):
        info = SystemInfo.from_os_info()
    assert info.os_type.kind is OsFamily.LINUX
    assert info.os_type.distrib == ""
    assert info.version == "2.15"


def test_from_os_info_macos():
    with patch("platform.system", return_value="Darwin"), patch(
        "platform.mac_ver", return_value=("14.1", ("", "", ""), "arm64")
    ):
        info = SystemInfo.from_os_info()
    assert info.os_type == OsType.macos()
    assert info.version == "14.1"


def test_from_os_info_other_system():
    with patch("platform.system", return_value="FreeBSD"):
        info = SystemInfo.from_os_info()
    assert info.os_type == OsType.other("FreeBSD")
    assert info.os_family() == "other"