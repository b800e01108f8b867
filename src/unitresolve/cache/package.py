"""
Type-checked packages.
"""

from typing import Dict, List, Optional

from unitresolve.cache.metadata import Metadata
from unitresolve.cache.parsed import ParsedFile
from unitresolve.exceptions import FileNotInPackageError
from unitresolve.protocol import DocumentURI


class Package:
    """
    The result of type-checking one package's metadata.

    Owns the parsed form of every compiled file. Instances are created
    and cached by the snapshot; callers should treat them as read-only.
    """

    def __init__(
        self,
        metadata: Metadata,
        files: List[ParsedFile],
        type_errors: Optional[List[str]] = None,
    ):
        self.metadata = metadata
        self._files: Dict[DocumentURI, ParsedFile] = {f.uri: f for f in files}
        self.type_errors = type_errors or []

    @property
    def id(self):
        return self.metadata.id

    def file(self, uri: DocumentURI) -> ParsedFile:
        pgf = self._files.get(uri)
        if pgf is None:
            raise FileNotInPackageError(uri, self.metadata.id)
        return pgf

    def compiled_go_files(self) -> List[ParsedFile]:
        return [self._files[uri] for uri in self.metadata.compiled_go_files if uri in self._files]

    def has_type_errors(self) -> bool:
        return bool(self.type_errors)

    def __repr__(self) -> str:
        return f"Package({self.metadata.id!r}, files={len(self._files)})"
