"""How packages are linked from the cache into a project library."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Iterator
from enum import Enum
from pathlib import Path

try:
    import fcntl
except ImportError:  # not available on Windows
    fcntl = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

LINK_ENV_NAME = "RV_LINK_MODE"
# Linux ioctl request that shares the extents of one file with another.
_FICLONE = 0x40049409


class LinkError(Exception):
    """Files could not be linked into the library."""

    def __init__(self, message: str, source: Path | None = None, destination: Path | None = None):
        super().__init__(message)
        self.source = source
        self.destination = destination


def copy_folder(source: Path, destination: Path) -> None:
    """Copy the content of ``source`` into ``destination``."""
    shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)


def _walk(root: Path) -> Iterator[tuple[Path, bool]]:
    """Yield (path, is_dir) for root and everything below it, without following symlinks."""
    if not root.is_dir():
        raise FileNotFoundError(f"{root} is not a directory")
    yield root, True
    yield from _walk_children(root)


def _walk_children(directory: Path) -> Iterator[tuple[Path, bool]]:
    with os.scandir(directory) as entries:
        children = [(Path(e.path), e.is_dir(follow_symlinks=False)) for e in entries]
    for path, is_dir in children:
        yield path, is_dir
        if is_dir:
            yield from _walk_children(path)


def _reflink(source: Path, destination: Path) -> None:
    if fcntl is None or not sys.platform.startswith("linux"):
        raise LinkError(
            f"Failed to reflink {source} to {destination}: not supported on this platform",
            source,
            destination,
        )
    try:
        with open(source, "rb") as src, open(destination, "wb") as dst:
            fcntl.ioctl(dst.fileno(), _FICLONE, src.fileno())
        shutil.copymode(source, destination)
    except OSError as exc:
        raise LinkError(f"Failed to reflink {source} to {destination}: {exc}", source, destination) from exc


def _clone_recursive(source: Path, library: Path, entry: Path) -> None:
    target = library / entry.relative_to(source)
    if entry.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        for child in entry.iterdir():
            _clone_recursive(source, library, child)
        return
    _reflink(entry, target)


def _clone_package(source: Path, library: Path) -> None:
    for entry in source.iterdir():
        _clone_recursive(source, library, entry)


def _hardlink_package(source: Path, library: Path) -> None:
    for path, is_dir in _walk(source):
        out_path = library / path.relative_to(source)
        if is_dir:
            out_path.mkdir(parents=True, exist_ok=True)
        else:
            os.link(path, out_path)


def _symlink_package(source: Path, library: Path) -> None:
    logger.debug("Linking package from %s to %s using symlinks", source, library)
    for path, is_dir in _walk(source):
        out_path = library / path.relative_to(source)
        if is_dir:
            out_path.mkdir(parents=True, exist_ok=True)
            continue
        try:
            os.symlink(path, out_path, target_is_directory=path.is_dir())
        except OSError as exc:
            logger.error("Failed to create symlink from %s to %s, error: %s", path, out_path, exc)
            raise


class LinkMode(Enum):
    """The way files are put into the library."""

    COPY = "copy"
    CLONE = "clone"
    HARDLINK = "hardlink"
    SYMLINK = "symlink"

    @classmethod
    def default(cls) -> LinkMode:
        """Copy-on-write clones on macOS, hard links elsewhere."""
        return cls.CLONE if sys.platform == "darwin" else cls.HARDLINK

    @classmethod
    def from_env(cls) -> LinkMode:
        """The mode set in the environment, or the default one."""
        value = os.environ.get(LINK_ENV_NAME)
        if value is not None:
            try:
                return cls(value.lower())
            except ValueError:
                pass
        return cls.default()

    @classmethod
    def symlink_if_possible(cls) -> LinkMode:
        """Symlinks, except on Windows where they need admin rights."""
        return cls.COPY if sys.platform == "win32" else cls.SYMLINK

    def _link(self, source: Path, destination: Path) -> None:
        if self is LinkMode.COPY:
            copy_folder(source, destination)
        elif self is LinkMode.CLONE:
            _clone_package(source, destination)
        elif self is LinkMode.HARDLINK:
            _hardlink_package(source, destination)
        else:
            _symlink_package(source, destination)

    def link_files(self, package_name: str, source: str | os.PathLike, destination: str | os.PathLike) -> None:
        """Put the content of ``source`` into ``destination``, falling back to copying."""
        source = Path(source)
        destination = Path(destination)
        pkg_in_lib = destination / package_name
        if pkg_in_lib.is_dir():
            shutil.rmtree(pkg_in_lib)

        try:
            self._link(source, destination)
        except (OSError, LinkError) as exc:
            if self is LinkMode.COPY:
                if isinstance(exc, LinkError):
                    raise
                raise LinkError(
                    f"Failed to copy {source} to {destination}: {exc}", source, destination
                ) from exc
            if pkg_in_lib.is_dir():
                shutil.rmtree(pkg_in_lib)
            logger.warning("Failed to %s files: %s. Falling back to copying files.", self.value, exc)
            try:
                copy_folder(source, destination)
            except OSError as copy_exc:
                raise LinkError(
                    f"Failed to copy {source} to {destination}: {copy_exc}", source, destination
                ) from copy_exc