import os
import sys

import pytest

from rvsync.link import LINK_ENV_NAME, LinkError, LinkMode


@pytest.fixture
def cache_pkg(tmp_path):
    source = tmp_path / "cache"
    pkg = source / "mypkg"
    (pkg / "R").mkdir(parents=True)
    (pkg / "DESCRIPTION").write_text("Package: mypkg\n")
    (pkg / "R" / "mypkg.rdb").write_bytes(b"\x00\x01binary")
    return source


def assert_same_content(library):
    assert (library / "mypkg" / "DESCRIPTION").read_text() == "Package: mypkg\n"
    assert (library / "mypkg" / "R" / "mypkg.rdb").read_bytes() == b"\x00\x01binary"


@pytest.mark.parametrize("mode_name", ["COPY", "CLONE", "HARDLINK", "SYMLINK"])
def test_every_mode_links_content(tmp_path, cache_pkg, mode_name):
    library = tmp_path / "library"
    result = LinkMode[mode_name].link_files("mypkg", cache_pkg, library)
    assert result is None
    assert_same_content(library)


def test_hardlink_shares_inode(tmp_path, cache_pkg):
    library = tmp_path / "library"
    result = LinkMode.HARDLINK.link_files("mypkg", cache_pkg, library)
    assert result is None
    linked = library / "mypkg" / "DESCRIPTION"
    assert linked.read_text() == "Package: mypkg\n"
    assert os.path.samefile(cache_pkg / "mypkg" / "DESCRIPTION", linked)
    assert linked.stat().st_nlink == 2


def test_symlink_creates_links(tmp_path, cache_pkg):
    library = tmp_path / "library"
    LinkMode.SYMLINK.link_files("mypkg", cache_pkg, library)
    link = library / "mypkg" / "DESCRIPTION"
    assert link.is_symlink()
    assert os.readlink(link) == str(cache_pkg / "mypkg" / "DESCRIPTION")


def test_copy_creates_independent_files(tmp_path, cache_pkg):
    library = tmp_path / "library"
    LinkMode.COPY.link_files("mypkg", cache_pkg, library)
    copied = library / "mypkg" / "DESCRIPTION"
    assert not copied.is_symlink()
    assert not os.path.samefile(cache_pkg / "mypkg" / "DESCRIPTION", copied)


def test_existing_package_is_replaced(tmp_path, cache_pkg):
    library = tmp_path / "library"
    stale = library / "mypkg" / "stale.txt"
    stale.parent.mkdir(parents=True)
    stale.write_text("old")
    LinkMode.HARDLINK.link_files("mypkg", cache_pkg, library)
    assert not stale.exists()
    assert_same_content(library)


def test_fallback_to_copy_when_link_fails(tmp_path, cache_pkg):
    (cache_pkg / "extra.txt").write_text("new")
    library = tmp_path / "library"
    library.mkdir()
    (library / "extra.txt").write_text("old")
    LinkMode.HARDLINK.link_files("mypkg", cache_pkg, library)
    assert (library / "extra.txt").read_text() == "new"
    assert not os.path.samefile(cache_pkg / "extra.txt", library / "extra.txt")
    assert_same_content(library)


def test_copy_missing_source_raises(tmp_path):
    with pytest.raises(LinkError):
        LinkMode.COPY.link_files("mypkg", tmp_path / "missing", tmp_path / "library")


def test_fallback_missing_source_raises(tmp_path):
    with pytest.raises(LinkError):
        LinkMode.SYMLINK.link_files("mypkg", tmp_path / "missing", tmp_path / "library")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("copy", LinkMode.COPY),
        ("CLONE", LinkMode.CLONE),
        ("Hardlink", LinkMode.HARDLINK),
        ("symlink", LinkMode.SYMLINK),
    ],
)
def test_from_env(monkeypatch, value, expected):
    monkeypatch.setenv(LINK_ENV_NAME, value)
    assert LinkMode.from_env() is expected


def test_from_env_invalid_uses_default(monkeypatch):
    monkeypatch.setenv(LINK_ENV_NAME, "teleport")
    assert LinkMode.from_env() is LinkMode.default()


def test_default_depends_on_platform(monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    assert LinkMode.default() is LinkMode.CLONE
    monkeypatch.setattr(sys, "platform", "linux")
    assert LinkMode.default() is LinkMode.HARDLINK


def test_symlink_if_possible(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    assert LinkMode.symlink_if_possible() is LinkMode.COPY
    monkeypatch.setattr(sys, "platform", "linux")
    assert LinkMode.symlink_if_possible() is LinkMode.SYMLINK