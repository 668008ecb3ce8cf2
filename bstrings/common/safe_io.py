"""Read-only windowed file access for string extraction.

This module provides the file layer of the extractor.  Input files are
opened strictly read-only with a plain descriptor (no exclusive lock, so
other processes may keep reading the same file) and are consumed in
fixed-size windows so that arbitrarily large images can be scanned in
bounded memory.

Key guarantees:
    - Input files are opened exclusively with O_RDONLY.
    - No write, append, or truncate operations are exposed.
    - Symlinks that resolve to block/character devices are rejected.
    - A window that cannot be read in full aborts the scan.
    - The descriptor is released on every exit path of the context
      manager.

Windows are scanned independently of one another: a printable run that
straddles a window edge is reported as two pieces (or dropped when a
piece is shorter than the minimum length).  Window boundaries are byte
aligned to ``chunk_size`` and never overlap.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from bstrings.common.errors import NotFoundError, OutputPathError, ScanReadError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CHUNK_SIZE: int = 512 * (1 << 20)  # 512 MiB

_OPEN_FLAGS: int = os.O_RDONLY | getattr(os, "O_BINARY", 0)


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Window:
    """A contiguous byte range of the input file held in memory."""

    index: int
    """Zero-based position of this window in the scan order."""

    offset: int
    """Absolute byte offset of the first byte of *data*."""

    data: bytes
    """Raw bytes of ``[offset, offset + length)``."""

    @property
    def length(self) -> int:
        """Number of bytes in this window."""
        return len(self.data)


# ---------------------------------------------------------------------------
# Standalone validation helpers
# ---------------------------------------------------------------------------


def validate_input_path(path: str | os.PathLike[str]) -> Path:
    """Validate that *path* is a readable regular file.

    Performs the following checks:
        1. The path exists on disk.
        2. The **resolved** path (after symlink resolution) points to a
           regular file -- not a block device, character device, FIFO,
           or socket.
        3. The current process has read permission.

    Parameters
    ----------
    path:
        Filesystem path to validate.

    Returns
    -------
    Path
        The fully-resolved :class:`pathlib.Path`.

    Raises
    ------
    NotFoundError
        If *path* does not exist.
    ScanReadError
        If *path* is not a regular file after symlink resolution, or if
        it is not readable.
    """
    p = Path(path)

    if not p.exists():
        raise NotFoundError(f"Input file does not exist: {p}")

    resolved = p.resolve(strict=True)

    # Stat the *resolved* target so symlinks to devices are caught.
    st = resolved.stat()
    if not stat.S_ISREG(st.st_mode):
        raise ScanReadError(
            f"Input path is not a regular file (mode "
            f"{stat.filemode(st.st_mode)}): {resolved}"
        )

    if not os.access(resolved, os.R_OK):
        raise ScanReadError(f"Input file is not readable: {resolved}")

    logger.info("Validated input path: %s (size=%d bytes)", resolved, st.st_size)
    return resolved


def prepare_output_file(
    path: str | os.PathLike[str],
    input_path: str | os.PathLike[str] | None = None,
) -> Path:
    """Make sure a results file can be written at *path*.

    Creates the parent directory (with parents) if it does not already
    exist.  The file itself is not created here.

    Parameters
    ----------
    path:
        Desired results file.
    input_path:
        Optional input file.  When provided, *path* must not resolve to
        the same file, so the input is never overwritten.

    Returns
    -------
    Path
        The resolved results file path.

    Raises
    ------
    OutputPathError
        If the parent directory cannot be created, *path* is an existing
        directory, or *path* is the input file.
    """
    out = Path(path).expanduser().resolve()

    if input_path is not None and out == Path(input_path).resolve():
        raise OutputPathError(f"Results file {out} would overwrite the input file")

    if out.is_dir():
        raise OutputPathError(f"Results path is a directory: {out}")

    try:
        out.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputPathError(f"Cannot create directory {out.parent}: {exc}") from exc

    if not os.access(out.parent, os.W_OK):
        raise OutputPathError(f"Directory is not writable: {out.parent}")

    logger.info("Results file ready: %s", out)
    return out


# ---------------------------------------------------------------------------
# SafeReader
# ---------------------------------------------------------------------------


class SafeReader:
    """Read-only file reader that hands out fixed-size windows.

    Opens the target file with :data:`os.O_RDONLY` and provides windowed
    reads -- all without ever writing to the file.

    Usage::

        with SafeReader("/evidence/memory.dmp") as reader:
            print(reader.get_size())
            for window in reader.iter_windows(64 * 1024 * 1024):
                process(window.data)
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path: Path = validate_input_path(path)
        self._fd: int = -1
        self._size: int = 0
        self._closed: bool = True

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> SafeReader:
        self._open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    # -- internal open / close ----------------------------------------------

    def _open(self) -> None:
        """Open the input file read-only via low-level OS descriptor."""
        if not self._closed:
            return
        try:
            self._fd = os.open(str(self._path), _OPEN_FLAGS)
        except OSError as exc:
            raise ScanReadError(f"Cannot open {self._path}: {exc}") from exc
        try:
            self._size = os.fstat(self._fd).st_size
        except OSError as exc:
            os.close(self._fd)
            self._fd = -1
            raise ScanReadError(f"Cannot stat {self._path}: {exc}") from exc
        self._closed = False
        logger.info(
            "Opened input file (fd=%d): %s (%d bytes)",
            self._fd,
            self._path,
            self._size,
        )

    def close(self) -> None:
        """Close the underlying file descriptor if it is still open."""
        if self._closed:
            return
        os.close(self._fd)
        logger.info("Closed input file (fd=%d): %s", self._fd, self._path)
        self._fd = -1
        self._closed = True

    # -- helpers ------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("SafeReader is not open; use it as a context manager")

    def _pread_exact(self, size: int, offset: int) -> bytes:
        """Read exactly *size* bytes at *offset*.

        A single ``pread`` may return fewer bytes than asked for (Linux
        caps one call just below 2 GiB), so reads are repeated until the
        window is full.  Reaching end of file first is a short read.
        """
        parts: list[bytes] = []
        received = 0
        while received < size:
            try:
                part = os.pread(self._fd, size - received, offset + received)
            except OSError as exc:
                raise ScanReadError(
                    f"Read failed at offset {offset + received} in {self._path}: {exc}"
                ) from exc
            if not part:
                raise ScanReadError(
                    f"Short read at offset {offset} in {self._path}: "
                    f"expected {size} bytes, got {received}"
                )
            parts.append(part)
            received += len(part)
        return b"".join(parts)

    # -- public API ---------------------------------------------------------

    @property
    def path(self) -> Path:
        """Return the resolved input file path."""
        return self._path

    def get_size(self) -> int:
        """Return the total size of the input file in bytes."""
        self._ensure_open()
        return self._size

    def count_windows(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
        """Return how many windows :meth:`iter_windows` will yield."""
        self._ensure_open()
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
        return (self._size + chunk_size - 1) // chunk_size

    def iter_windows(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Window]:
        """Iterate over the file in fixed-size, non-overlapping windows.

        The last window may be shorter than *chunk_size*.  An empty file
        yields nothing.

        Parameters
        ----------
        chunk_size:
            Size of each window in bytes.  Defaults to 512 MiB.

        Yields
        ------
        Window
            One window per ``chunk_size`` slice of the file, in order.

        Raises
        ------
        ScanReadError
            If any window cannot be read in full.
        """
        self._ensure_open()

        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")

        index = 0
        offset = 0
        remaining = self._size
        logger.info(
            "iter_windows: starting (chunk_size=%d, total=%d, file=%s)",
            chunk_size,
            self._size,
            self._path,
        )

        while remaining > 0:
            read_size = min(chunk_size, remaining)
            data = self._pread_exact(read_size, offset)
            logger.debug(
                "iter_windows: window=%d offset=%d length=%d",
                index,
                offset,
                read_size,
            )
            yield Window(index=index, offset=offset, data=data)
            index += 1
            offset += read_size
            remaining -= read_size

        logger.info("iter_windows: completed (bytes_read=%d)", offset)

    # -- repr ---------------------------------------------------------------

    def __repr__(self) -> str:
        state = "open" if not self._closed else "closed"
        return f"<SafeReader path={self._path!r} state={state}>"
