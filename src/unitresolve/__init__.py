"""
unitresolve - file-to-package resolution for a code-intelligence backend.

Given a file, picks the package (narrowest or widest, never an
intermediate test variant) that should answer a query about it.
"""

__version__ = "0.3.0"

from unitresolve.resolution import (
    narrowest_package_for_file,
    widest_package_for_file,
    narrowest_metadata_for_file,
    Policy,
)
from unitresolve.cache import Metadata, MemorySnapshot, Package, ParsedFile
from unitresolve.context import Context, ContextError, Canceled, DeadlineExceeded, background, with_cancel, with_timeout
from unitresolve.exceptions import (
    UnitResolveError,
    NoPackageError,
    InternalConsistencyError,
    AnalysisError,
)
from unitresolve.protocol import DocumentURI, uri_from_path

__all__ = [
    "__version__",
    "narrowest_package_for_file",
    "widest_package_for_file",
    "narrowest_metadata_for_file",
    "Policy",
    "Metadata",
    "MemorySnapshot",
    "Package",
    "ParsedFile",
    "Context",
    "ContextError",
    "Canceled",
    "DeadlineExceeded",
    "background",
    "with_cancel",
    "with_timeout",
    "UnitResolveError",
    "NoPackageError",
    "InternalConsistencyError",
    "AnalysisError",
    "DocumentURI",
    "uri_from_path",
]
