from datetime import timedelta

from rvsync.changes import SyncChange
from rvsync.system_req import SysInstallationStatus


def _change(sys_deps=("libxml2", "libcurl")):
    return SyncChange.installed_change(
        "dplyr",
        "1.1.3",
        "https://cran.example.com",
        "binary",
        timedelta(milliseconds=42, microseconds=700),
        list(sys_deps),
    )


def test_removed_render():
    change = SyncChange.removed("ggplot2")
    assert not change.installed
    assert change.render(True, True) == "- ggplot2"


def test_installed_defaults_to_unknown_status():
    change = _change()
    assert [d.status for d in change.sys_deps] == [SysInstallationStatus.UNKNOWN] * 2
    assert change.installed


def test_render_without_sys_deps_or_timing():
    change = _change(sys_deps=())
    assert change.render(False, False) == "+ dplyr (1.1.3, binary from https://cran.example.com)"


def test_render_with_timing_truncates_to_ms():
    change = _change(sys_deps=())
    assert change.render(True, False).endswith(" in 42ms")


def test_render_sys_deps_without_status():
    change = _change()
    assert change.render(False, False).endswith(" with sys deps: libxml2, libcurl")


def test_update_status_and_render_marks():
    change = _change()
    change.update_sys_deps_status({"libxml2": SysInstallationStatus.PRESENT})
    assert change.sys_deps[0].status is SysInstallationStatus.PRESENT
    assert change.sys_deps[1].status is SysInstallationStatus.UNKNOWN
    assert change.render(False, True).endswith(" with sys deps: ✓ libxml2, ✗ libcurl")


def test_to_dict_installed():
    change = _change(sys_deps=("libxml2",))
    data = change.to_dict()
    assert data["name"] == "dplyr"
    assert data["version"] == "1.1.3"
    assert data["kind"] == "binary"
    assert data["source"] == "https://cran.example.com"
    assert data["timing"] == 42
    assert data["sys_deps"] == [{"name": "libxml2", "status": "unknown"}]
    assert "installed" not in data


def test_to_dict_removed_only_name():
    assert SyncChange.removed("ggplot2").to_dict() == {"name": "ggplot2"}


def test_to_dict_uses_source_to_dict():
    class FakeSource:
        def to_dict(self):
            return {"repository": "https://cran.example.com"}

    change = SyncChange.installed_change("a", "1", FakeSource(), "source", timedelta(0), [])
    data = change.to_dict()
    assert data["source"] == {"repository": "https://cran.example.com"}
    assert "sys_deps" not in data