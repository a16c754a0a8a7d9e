# rvsync

Building blocks for managing the package library of an R project.
The package checks version constraints between packages. It plans the order
in which packages can be installed, and it places built packages into a
project library. It also describes the running system and looks up the
system libraries that R packages need.

It has no dependencies outside the standard library.

## Installation

```
pip install rvsync
```

## Modules

- `rvsync.system_info`
  - `SystemInfo` holds the OS type, version, codename and architecture.
    `SystemInfo.from_os_info()` detects them for the running machine.
  - `os_family()` gives `"windows"`, `"macos"`, `"linux"` or `"other"`.
  - `sysreq_data()` gives the `(distribution, release)` pair used for
    system requirement queries. On anything other than Linux this is
    `("invalid", "")`.
  - `OsType` carries the family and, on Linux, the distribution.
    `tarball_extension()` returns `zip`, `tgz` or `tar.gz`.
- `rvsync.system_req`
  - `is_supported(system_info)` tells whether the distribution and release
    are ones the system requirements service knows.
  - `get_system_requirements(system_info, url=None)` fetches the mapping of
    R package to system packages over HTTP. The URL is taken in this order:
    the `url` argument, then the `RV_SYS_REQ_URL` environment variable, then
    the default service address.
  - `parse_requirements(content)` parses such a response. It raises
    `ValueError` on a malformed one.
  - `check_installation_status(system_info, sys_deps)` returns a
    `SysInstallationStatus` (`present`, `absent` or `unknown`) for each
    system dependency. On Ubuntu and Debian it asks `dpkg-query`. On other
    supported systems every dependency is reported `absent`. On unsupported
    systems the result is empty.
  - `SysDep` pairs a name with its status.
- `rvsync.utils`
  - `get_max_workers(env_var="RV_NUM_CPUS")` reads a worker count from the
    environment and falls back to the number of CPUs.
  - `create_spinner(visible, message)` returns a `Spinner` for the
    terminal, already started when it is visible. It can also be used as a
    context manager. `finish_and_clear()` stops it and clears the line.
- `rvsync.link`
  - `LinkMode` is one of `COPY`, `CLONE`, `HARDLINK` and `SYMLINK`.
    `LinkMode.default()` is `CLONE` on macOS and `HARDLINK` elsewhere.
  - `LinkMode.from_env()` reads `RV_LINK_MODE`, which may be `copy`,
    `clone`, `hardlink` or `symlink`.
  - `LinkMode.symlink_if_possible()` is `SYMLINK`, except on Windows, where
    it is `COPY`.
  - `link_files(package_name, source, destination)` places the package into
    the library. Any earlier copy of the package is removed first. If the
    chosen mode fails, the files are copied instead. A `LinkError` is raised
    only when copying fails too.
- `rvsync.cnf`
  - `solve_formula(formula, num_vars)` is a small backtracking solver for
    formulas in conjunctive normal form. It returns an empty dict when it
    finds no assignment.
  - `unit_propagation`, `is_satisfied` and `most_constrained_variable` are
    the steps it is built from.
- `rvsync.sat`
  - `DependencySolver` collects package versions (`add_package`) and
    requirements (`add_requirement`).
  - `solve()` returns one chosen version per package. When no choice works,
    it raises `UnsatisfiableError`. Its `failures` lists the
    `PackageRequirement`s that conflict: the requirements no version meets,
    or else a minimal conflicting set.
- `rvsync.dependency`
  - `ResolvedDependency` describes a package that was found.
    `is_installed()`, `is_local()`, `all_dependencies_names()` and
    `describe()` answer questions about it.
  - `UnresolvedDependency` describes a package that was not found. It
    offers `with_error`, `with_remote`, `with_url` and
    `is_listed_in_config`.
  - `PackageType` is `SOURCE` or `BINARY`.
- `rvsync.result`
  - `Resolution` gathers found and failed dependencies.
  - `finalize()` drops failures that were satisfied after all. It then runs
    the solver, keeping one version per package or filling `req_failures`
    with `RequirementFailure`s.
  - `is_success()` and `req_error_messages()` report the outcome.
- `rvsync.build_plan`
  - `BuildPlan` hands out, through `get()`, a `BuildStep`. The step is
    either install this package, wait, or done. A package is handed out
    once all its dependencies have been passed to `mark_installed()`, so
    several packages can be built in parallel.
- `rvsync.changes`
  - `SyncChange` records a package added (`installed_change`) or removed
    (`removed`).
  - `render()` gives a one-line summary, and `to_dict()` gives a
    JSON-friendly mapping.
- `rvsync.errors`
  - `SyncError` wraps an I/O, link, install or download failure.
  - `SyncFailedError` lists the packages that could not be installed.

## Example

```python
from dataclasses import dataclass

from rvsync.sat import DependencySolver, UnsatisfiableError


@dataclass(frozen=True)
class AtLeast:
    minimum: tuple

    def is_satisfied(self, version):
        return version >= self.minimum

    def __str__(self):
        return "(>= " + ".".join(map(str, self.minimum)) + ")"


solver = DependencySolver()
solver.add_package("A", (1, 0, 0))
solver.add_package("A", (2, 0, 0))
solver.add_package("B", (1, 1, 0))
solver.add_requirement("A", AtLeast((2, 0, 0)), "B")
try:
    chosen = solver.solve()  # {"A": (2, 0, 0), "B": (1, 1, 0)}
except UnsatisfiableError as exc:
    for failure in exc.failures:
        print(failure)
```

Versions may be any hashable values that can be ordered. Requirements may
be any objects with an `is_satisfied(version)` method.

## What it does not do

- There is no command-line program.
- It does not look packages up in repositories, lockfiles, git or URLs.
  `Resolution` only holds what the caller has found.
- It does not download packages or run R to build and install them.
- It does not drive a whole sync. `BuildPlan`, `LinkMode`, `SyncChange`
  and the errors are the pieces such a step is made from.

## Development

```
pip install -e ".[test]"
pytest
```