"""Folder traversal and archival driver.

Walks a source tree depth-first, lets the active policy slice each qualifying
file into date-homogeneous chunks and writes every chunk as one tar entry into
the bucket chosen for ``(target prefix, chunk date)``. The policy is always
released at the end of a traversal so open archives are flushed and hashed.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

from mdpack.core.exceptions import OutputIOError, SourceIOError
from mdpack.core.logging import log_context, logger
from mdpack.core.models import CompressionResult
from mdpack.core.policies import Clock, CodeFilter, ResourcePolicy, create_policy, parse_resource_key


class Compressor:
    """Builds the compressed archives of one target folder."""

    def __init__(self, target_folder: str | Path, clock: Clock | None = None) -> None:
        self.target_folder = Path(target_folder)
        self.clock = clock

    def compress(
        self,
        resource_key: str,
        source_folder: str | Path,
        code_filter: CodeFilter | None = None,
    ) -> CompressionResult:
        """Archive ``source_folder`` as resource ``resource_key`` (e.g. ``sse.d1``).

        Raises:
            UnsupportedResourceError: for an unknown market or data type.
        """

        market, _ = parse_resource_key(resource_key)
        policy = create_policy(resource_key, code_filter, self.clock)
        dest_prefix = f"{self.target_folder.as_posix()}/{market.value.upper()}/{policy.target_prefix}"

        with log_context(resource=policy.data_type):
            logger.info(f"Compressor.compress: market={market.value}, policy={policy!r}, source={source_folder}")
            return self.translate_folder(dest_prefix, Path(source_folder), policy)

    def translate_folder(self, dest_prefix: str, source_folder: Path, policy: ResourcePolicy) -> CompressionResult:
        """Traverse ``source_folder`` with ``policy`` and release it afterwards."""

        result = CompressionResult(resource_key=policy.data_type)
        try:
            Path(dest_prefix).parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.bind(error_code="OUTPUT_IO_ERROR").error(
                f"Compressor.translate_folder: cannot build target folder for {dest_prefix}: {exc}"
            )
            result.failures.append(f"cannot create target folder: {exc}")
            return result

        policy.initialize()
        try:
            if not source_folder.is_dir():
                message = f"source folder is not readable: {source_folder}"
                logger.bind(error_code="SOURCE_IO_ERROR").error(f"Compressor.translate_folder: {message}")
                result.failures.append(message)
            else:
                self._compress_folder(dest_prefix, source_folder, source_folder.name, policy, result)
        finally:
            result.manifest = policy.release()

        logger.info(
            f"Compressor.translate_folder: {len(result.manifest)} archives, "
            f"{len(result.failures)} failures ({source_folder})"
        )
        return result

    def _compress_folder(
        self,
        dest_prefix: str,
        folder: Path,
        relative: str,
        policy: ResourcePolicy,
        result: CompressionResult,
    ) -> None:
        try:
            entries = _list_folder(folder)
        except SourceIOError as exc:
            logger.bind(error_code=exc.error_code).warning(f"Compressor: skipping folder {folder}: {exc.message}")
            return

        folders: list[os.DirEntry[str]] = []
        files: list[os.DirEntry[str]] = []
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                folders.append(entry)
            elif entry.is_symlink() and entry.is_dir():
                # linked folders may point back into the tree
                logger.bind(error_code="SOURCE_IO_ERROR").warning(f"Compressor: skipping linked folder {entry.path}")
            else:
                files.append(entry)

        for entry in folders:
            self._compress_folder(dest_prefix, Path(entry.path), f"{relative}/{entry.name}", policy, result)

        for entry in files:
            try:
                compress_file(dest_prefix, Path(entry.path), f"{relative}/{entry.name}", policy)
            except SourceIOError as exc:
                logger.bind(error_code=exc.error_code).warning(f"Compressor: skipping file {entry.path}: {exc.message}")
            except OutputIOError as exc:
                logger.bind(error_code=exc.error_code).error(f"Compressor: aborted {entry.path}: {exc.message}")
                result.failures.append(f"{entry.path}: {exc.message}")


def _list_folder(folder: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(folder) as iterator:
            return sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        raise SourceIOError(f"cannot list folder: {exc}", path=str(folder)) from exc


def compress_file(dest_prefix: str, source_file: Path, relative_path: str, policy: ResourcePolicy) -> int:
    """Write every chunk of ``source_file`` as one archive entry.

    Entry metadata comes from the source file, entry content is the
    transformed chunk. Returns the number of entries written.

    Raises:
        SourceIOError: if the file cannot be read.
        OutputIOError: if no writer is available or an entry cannot be written.
    """

    if not policy.qualifies(str(source_file)):
        return 0

    try:
        info = source_file.stat()
        data = source_file.read_bytes()
    except OSError as exc:
        raise SourceIOError(f"cannot read file: {exc}", path=str(source_file)) from exc

    entry_name = policy.rewrite_path(relative_path)
    mode = stat.S_IMODE(info.st_mode)
    written = 0
    offset = 0
    while True:
        chunk = policy.load_next(data, offset)
        if not chunk:
            break
        offset += chunk.consumed

        writer = policy.resolve_writer(dest_prefix, chunk.date)
        if writer is None:
            raise OutputIOError(f"no archive writer for date {chunk.date}", path=dest_prefix)
        writer.add_entry(entry_name, chunk.data, mode=mode, mtime=info.st_mtime)
        written += 1

    return written


__all__ = ["Compressor", "compress_file"]
