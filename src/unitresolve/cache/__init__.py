"""
Workspace state consumed by the resolution pipeline.

Components:
- metadata: Metadata and package identifier types
- file: FileHandle, FileSource, DiskFileSource, OverlayFileSource
- parsed: ParseMode, ParsedFile, parse_file
- package: Package (a type-checked unit)
- snapshot: Snapshot protocol and MemorySnapshot
"""

from .metadata import (
    Metadata,
    PackageID,
    PackagePath,
    PackageName,
    ImportPath,
    new_test_variant,
    new_intermediate_test_variant,
)
from .file import FileHandle, FileSource, DiskFileSource, OverlayFileSource
from .parsed import ParseMode, ParsedFile, ParseError, ImportSpec, Decl, parse_file
from .package import Package
from .snapshot import Snapshot, MemorySnapshot

__all__ = [
    # Metadata
    "Metadata",
    "PackageID",
    "PackagePath",
    "PackageName",
    "ImportPath",
    "new_test_variant",
    "new_intermediate_test_variant",
    # Files
    "FileHandle",
    "FileSource",
    "DiskFileSource",
    "OverlayFileSource",
    # Parsing
    "ParseMode",
    "ParsedFile",
    "ParseError",
    "ImportSpec",
    "Decl",
    "parse_file",
    # Packages
    "Package",
    "Snapshot",
    "MemorySnapshot",
]
