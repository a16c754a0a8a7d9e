"""Changes made to a project library by a sync."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from .system_req import SysDep, SysInstallationStatus

_PRESENT_MARK = "✓"
_ABSENT_MARK = "✗"


@dataclass
class SyncChange:
    """A package added to or removed from the library."""

    name: str
    installed: bool
    kind: Any = None
    version: str | None = None
    source: Any = None
    timing: timedelta | None = None
    sys_deps: list[SysDep] = field(default_factory=list)

    @classmethod
    def installed_change(
        cls,
        name: str,
        version: str,
        source: Any,
        kind: Any,
        timing: timedelta,
        sys_deps: Iterable[str],
    ) -> SyncChange:
        return cls(
            name=name,
            installed=True,
            kind=kind,
            version=version,
            source=source,
            timing=timing,
            sys_deps=[SysDep(dep) for dep in sys_deps],
        )

    @classmethod
    def removed(cls, name: str) -> SyncChange:
        return cls(name=name, installed=False)

    @property
    def timing_ms(self) -> int | None:
        if self.timing is None:
            return None
        return self.timing // timedelta(milliseconds=1)

    def update_sys_deps_status(
        self, sysdeps_status: Mapping[str, SysInstallationStatus]
    ) -> None:
        for sys_dep in self.sys_deps:
            status = sysdeps_status.get(sys_dep.name)
            if status is not None:
                sys_dep.status = status

    def render(self, include_timings: bool, supports_sysdeps_status: bool) -> str:
        """A one-line human readable description of the change."""
        if not self.installed:
            return f"- {self.name}"

        deps = []
        for sys_dep in self.sys_deps:
            if supports_sysdeps_status:
                mark = _PRESENT_MARK if sys_dep.status is SysInstallationStatus.PRESENT else _ABSENT_MARK
                deps.append(f"{mark} {sys_dep.name}")
            else:
                deps.append(sys_dep.name)

        line = f"+ {self.name} ({self.version}, {self.kind} from {self.source})"
        if deps:
            line += f" with sys deps: {', '.join(deps)}"
        if include_timings:
            line += f" in {self.timing_ms}ms"
        return line

    def to_dict(self) -> dict[str, Any]:
        """A JSON-friendly mapping; unset fields are left out."""
        out: dict[str, Any] = {"name": self.name}
        if self.kind is not None:
            out["kind"] = str(self.kind)
        if self.version is not None:
            out["version"] = self.version
        if self.source is not None:
            to_dict = getattr(self.source, "to_dict", None)
            out["source"] = to_dict() if callable(to_dict) else str(self.source)
        if self.timing is not None:
            out["timing"] = self.timing_ms
        if self.sys_deps:
            out["sys_deps"] = [
                {"name": dep.name, "status": dep.status.value} for dep in self.sys_deps
            ]
        return out