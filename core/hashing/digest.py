"""Deterministic content digests for files, strings and directory snapshots."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from pathlib import Path

from core.utils.errors import HashError

DEFAULT_ALGORITHM = "sha256"
SUPPORTED_ALGORITHMS = frozenset({"md5", "sha1", "sha256", "sha512", "blake2b"})

_CHUNK_SIZE = 1024 * 1024


def _new_hasher(algorithm: str):
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm)


def hash_bytes(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    h = _new_hasher(algorithm)
    h.update(data)
    return h.hexdigest()


def hash_string(text: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    return hash_bytes(text.encode("utf-8"), algorithm)


def hash_file(path: Path, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Hash the bytes of one file, reading in fixed-size chunks."""

    h = _new_hasher(algorithm)
    try:
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                h.update(chunk)
    except OSError as exc:
        raise HashError(f"Cannot read file for hashing: {path}", path=path) from exc
    return h.hexdigest()


def iter_files_sorted(
    root: Path,
    *,
    recursive: bool = True,
    exclude: Iterable[Path] = (),
) -> list[Path]:
    """List regular files under root ordered by their POSIX relative path.

    Ordering uses the relative path string so the snapshot is identical across
    platforms and independent of directory listing order.
    """

    excluded = {p.resolve() for p in exclude}
    try:
        candidates = root.rglob("*") if recursive else root.iterdir()
        files = [p for p in candidates if p.is_file() and p.resolve() not in excluded]
    except OSError as exc:
        raise HashError(f"Cannot list directory for hashing: {root}", path=root) from exc
    return sorted(files, key=lambda p: p.relative_to(root).as_posix())


def hash_all(
    path: Path,
    algorithm: str = DEFAULT_ALGORITHM,
    *,
    exclude: Iterable[Path] = (),
) -> list[str]:
    """Return one digest per file: a single token for a file, a sorted snapshot for a directory."""

    if path.is_dir():
        return [hash_file(p, algorithm) for p in iter_files_sorted(path, exclude=exclude)]
    if path.is_file():
        return [hash_file(path, algorithm)]
    raise HashError(f"Path does not exist: {path}", path=path)


def hash_directory_shallow(path: Path, algorithm: str = DEFAULT_ALGORITHM) -> list[str]:
    """Hash only the immediate files of a directory, sorted by name."""

    return [hash_file(p, algorithm) for p in iter_files_sorted(path, recursive=False)]
