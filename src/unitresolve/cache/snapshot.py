"""
Workspace snapshots: an immutable view of package metadata and file
content at one point in time.

The resolution pipeline only depends on the Snapshot protocol.
MemorySnapshot is the in-process implementation used by embedders and
tests: it is built from a fixed set of Metadata and a FileSource, and
memoizes type-checked packages.
"""

import threading
from typing import Dict, Iterable, List, Optional, Protocol

from unitresolve.cache.file import DiskFileSource, FileHandle, FileSource
from unitresolve.cache.metadata import Metadata, PackageID
from unitresolve.cache.package import Package
from unitresolve.cache.parsed import ParseMode, ParsedFile, parse_file
from unitresolve.context import Context
from unitresolve.exceptions import AnalysisError
from unitresolve.logging_config import logger
from unitresolve.protocol import DocumentURI


class Snapshot(Protocol):
    def metadata_for_file(self, ctx: Context, uri: DocumentURI) -> List[Metadata]:
        """
        Return the metadata of every package whose compiled files include
        uri, ordered by number of compiled files, fewest first.

        Raises only if ctx is done.
        """
        ...

    def type_check(self, ctx: Context, *ids: PackageID) -> List[Package]:
        """Type-check the given packages, returning one Package per ID in order."""
        ...


class MemorySnapshot:
    """
    Snapshot over an explicit list of package metadata.

    Args:
        metadata: All packages in the workspace. IDs must be unique.
        file_source: Where file content comes from (default: the disk).
    """

    def __init__(self, metadata: Iterable[Metadata], file_source: Optional[FileSource] = None):
        self._metadata: Dict[PackageID, Metadata] = {}
        for md in metadata:
            if md.id in self._metadata:
                raise ValueError(f"duplicate package ID {md.id}")
            self._metadata[md.id] = md

        self._by_file: Dict[DocumentURI, List[Metadata]] = {}
        for md in self._metadata.values():
            for uri in md.compiled_go_files:
                self._by_file.setdefault(uri, []).append(md)
        for metas in self._by_file.values():
            # Stable: equal sizes keep declaration order.
            metas.sort(key=lambda m: len(m.compiled_go_files))

        self.file_source = file_source or DiskFileSource()
        self._lock = threading.Lock()
        self._packages: Dict[PackageID, Package] = {}

        logger.debug(f"Snapshot created: {len(self._metadata)} packages, {len(self._by_file)} files")

    def metadata(self, id: PackageID) -> Optional[Metadata]:
        return self._metadata.get(id)

    def all_metadata(self) -> List[Metadata]:
        return list(self._metadata.values())

    def metadata_for_file(self, ctx: Context, uri: DocumentURI) -> List[Metadata]:
        ctx.check()
        # Callers own the returned list.
        return list(self._by_file.get(uri, ()))

    def read_file(self, ctx: Context, uri: DocumentURI) -> FileHandle:
        return self.file_source.read_file(ctx, uri)

    def parse_go(self, ctx: Context, uri: DocumentURI, mode: ParseMode = ParseMode.FULL) -> ParsedFile:
        """
        Parse one file without type-checking any package.

        Raises OSError from the file handle if the file cannot be read.
        """
        fh = self.read_file(ctx, uri)
        return parse_file(uri, fh.content(), mode)

    def type_check(self, ctx: Context, *ids: PackageID) -> List[Package]:
        pkgs = []
        for id in ids:
            ctx.check()
            with self._lock:
                pkg = self._packages.get(id)
            if pkg is None:
                pkg = self._check_package(ctx, id)
                with self._lock:
                    # Another thread may have finished first; keep its result.
                    pkg = self._packages.setdefault(id, pkg)
            pkgs.append(pkg)
        return pkgs

    def _check_package(self, ctx: Context, id: PackageID) -> Package:
        md = self._metadata.get(id)
        if md is None:
            raise AnalysisError(id, "no metadata for package")

        logger.debug(f"Type-checking {id} ({len(md.compiled_go_files)} files)")

        files: List[ParsedFile] = []
        type_errors: List[str] = []
        for uri in md.compiled_go_files:
            fh = self.read_file(ctx, uri)
            if not fh.exists():
                raise AnalysisError(id, f"reading {uri}: {fh.err}")
            pgf = parse_file(uri, fh.content(), ParseMode.FULL)
            if pgf.package_name is None:
                raise AnalysisError(id, f"{uri}:{pgf.parse_errors[0]}")
            files.append(pgf)
            type_errors.extend(f"{uri}:{err}" for err in pgf.parse_errors)
            if pgf.package_name != md.name:
                type_errors.append(
                    f"{uri}:{pgf.package_line}: package {pgf.package_name}; expected package {md.name}"
                )

        ctx.check()
        return Package(md, files, type_errors)
