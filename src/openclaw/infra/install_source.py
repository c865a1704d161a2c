"""Resolve an install source to a single archive file.

A source is either a local archive path or an npm package spec. Specs are
packed with ``npm pack --ignore-scripts`` and the produced tarball is chosen
by, in order: the last ``.tgz`` line of npm's stdout that exists on disk, the
only ``.tgz`` in the working directory, or the newest ``.tgz`` by mtime.

Failures are returned as ``ArchiveResult`` values rather than raised, since
callers usually try another strategy or report the message as-is.
"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import enum
import logging
import os
import pathlib
import shutil
import tempfile
from typing import TYPE_CHECKING

import openclaw.infra.archive
import openclaw.settings

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("openclaw.infra.install_source")

MIN_PACK_TIMEOUT_MS = 300_000
PACKED_SUFFIX = ".tgz"

_PACK_ENV = {
    "COREPACK_ENABLE_DOWNLOAD_PROMPT": "0",
    "NPM_CONFIG_IGNORE_SCRIPTS": "true",
}


@openclaw.settings.configurable("install")
@dataclasses.dataclass
class InstallSettings:
    pack_timeout_ms: int = MIN_PACK_TIMEOUT_MS
    npm_command: str = "npm"


class FailureKind(enum.Enum):
    ARCHIVE_NOT_FOUND = "archive_not_found"
    UNSUPPORTED_ARCHIVE = "unsupported_archive"
    PACK_FAILED = "pack_failed"
    PACK_TIMEOUT = "pack_timeout"
    NO_ARCHIVE_PRODUCED = "no_archive_produced"


@dataclasses.dataclass(frozen=True)
class ArchiveResult:
    ok: bool
    path: pathlib.Path | None = None
    error: str = ""
    failure: FailureKind | None = None

    @classmethod
    def success(cls, path: pathlib.Path) -> ArchiveResult:
        return cls(ok=True, path=path)

    @classmethod
    def fail(cls, failure: FailureKind, error: str) -> ArchiveResult:
        return cls(ok=False, error=error, failure=failure)


@contextlib.contextmanager
def with_temp_dir(prefix: str) -> Iterator[pathlib.Path]:
    """Yield a fresh temp directory, removed (best effort) on exit."""
    tmp_dir = pathlib.Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield tmp_dir
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)


def resolve_archive_source_path(archive_path: str) -> ArchiveResult:
    """Validate a local archive path."""
    resolved = openclaw.infra.archive.resolve_user_path(archive_path)
    if not openclaw.infra.archive.file_exists(resolved):
        return ArchiveResult.fail(
            FailureKind.ARCHIVE_NOT_FOUND, f"archive not found: {resolved}"
        )
    if openclaw.infra.archive.resolve_archive_kind(resolved) is None:
        return ArchiveResult.fail(
            FailureKind.UNSUPPORTED_ARCHIVE, f"unsupported archive: {resolved}"
        )
    return ArchiveResult.success(resolved)


def pack_timeout_seconds(timeout_ms: int) -> float:
    return max(timeout_ms, MIN_PACK_TIMEOUT_MS) / 1000


def _archive_from_output(stdout: str, cwd: pathlib.Path) -> pathlib.Path | None:
    """Scan npm's stdout bottom-up for a ``.tgz`` line naming a real file."""
    lines = [line.strip() for line in stdout.splitlines()]
    for line in reversed(lines):
        if not line.endswith(PACKED_SUFFIX):
            continue
        candidate = pathlib.Path(line)
        if not candidate.is_absolute():
            candidate = cwd / candidate
        if openclaw.infra.archive.file_exists(candidate):
            return candidate
        # Only the last archive-looking line is trusted.
        return None
    return None


def _scan_for_archive(cwd: pathlib.Path) -> pathlib.Path | None:
    """Pick the newest ``.tgz`` in *cwd*; equal mtimes fall back to path order."""
    candidates: list[tuple[int, str, pathlib.Path]] = []
    for entry in cwd.iterdir():
        if not entry.name.endswith(PACKED_SUFFIX) or not entry.is_file():
            continue
        try:
            mtime_ns = entry.stat().st_mtime_ns
        except FileNotFoundError:
            # Removed between listing and stat.
            continue
        candidates.append((-mtime_ns, str(entry), entry))
    if not candidates:
        return None
    return min(candidates)[2]


async def pack_npm_spec_to_archive(
    spec: str,
    timeout_ms: int,
    cwd: pathlib.Path,
    *,
    npm_command: str = "npm",
) -> ArchiveResult:
    """Run ``npm pack <spec>`` in *cwd* and locate the produced tarball."""
    cwd = pathlib.Path(cwd)
    timeout = pack_timeout_seconds(timeout_ms)
    try:
        proc = await asyncio.create_subprocess_exec(
            npm_command,
            "pack",
            spec,
            "--ignore-scripts",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd),
            env={**os.environ, **_PACK_ENV},
        )
    except OSError as exc:
        return ArchiveResult.fail(FailureKind.PACK_FAILED, f"npm pack failed: {exc}")

    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()
        return ArchiveResult.fail(
            FailureKind.PACK_TIMEOUT, f"npm pack timed out after {timeout:g}s"
        )

    stdout = out.decode("utf-8", errors="replace") if out else ""
    stderr = err.decode("utf-8", errors="replace") if err else ""
    if proc.returncode != 0:
        detail = stderr.strip() or stdout.strip()
        return ArchiveResult.fail(
            FailureKind.PACK_FAILED, f"npm pack failed: {detail}"
        )

    packed = _archive_from_output(stdout, cwd)
    if packed is None:
        logger.debug("npm pack output had no usable archive line; scanning %s", cwd)
        packed = _scan_for_archive(cwd)
    if packed is None:
        return ArchiveResult.fail(
            FailureKind.NO_ARCHIVE_PRODUCED, "npm pack produced no archive"
        )
    return ArchiveResult.success(packed)


def _looks_like_path(source: str) -> bool:
    source = source.strip()
    if source.startswith((".", "/", "~")):
        return True
    return pathlib.Path(source).expanduser().exists()


async def resolve_install_source(
    source: str,
    *,
    timeout_ms: int = MIN_PACK_TIMEOUT_MS,
    cwd: pathlib.Path,
    npm_command: str = "npm",
) -> ArchiveResult:
    """Resolve a path or npm spec to an archive, packing specs into *cwd*."""
    if _looks_like_path(source):
        return resolve_archive_source_path(source)
    return await pack_npm_spec_to_archive(
        source, timeout_ms, cwd, npm_command=npm_command
    )
