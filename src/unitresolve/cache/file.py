"""
File sources: mapping URIs to file handles.

Invariant shared by every FileSource: read_file raises only when the
context is done. Any other outcome (missing file, permission denied,
empty file) is carried by the returned FileHandle.
"""

import hashlib
import threading
from typing import Dict, Optional, Protocol

from unitresolve.context import Context
from unitresolve.logging_config import logger
from unitresolve.protocol import DocumentURI, uri_to_path


class FileHandle:
    """An immutable view of one file's content, or of the error reading it."""

    def __init__(
        self,
        uri: DocumentURI,
        content: Optional[bytes] = None,
        err: Optional[OSError] = None,
        version: int = 0,
    ):
        self.uri = uri
        self._content = content
        self.err = err
        self.version = version
        if content is not None:
            self.identity = hashlib.sha256(content).hexdigest()
        else:
            self.identity = ""

    def content(self) -> bytes:
        """Return the file's bytes, or raise the error encountered reading it."""
        if self.err is not None:
            raise self.err
        return self._content

    def exists(self) -> bool:
        return self.err is None

    def __repr__(self) -> str:
        state = f"err={self.err!r}" if self.err is not None else f"sha256={self.identity[:12]}"
        return f"FileHandle({self.uri}, {state})"


class FileSource(Protocol):
    def read_file(self, ctx: Context, uri: DocumentURI) -> FileHandle:
        """
        Return the FileHandle for uri, by reading the file or from a cache.

        Must raise only if ctx is done; the raised error is ctx's error.
        """
        ...


class DiskFileSource:
    """Reads files straight from the filesystem."""

    def read_file(self, ctx: Context, uri: DocumentURI) -> FileHandle:
        ctx.check()
        try:
            content = uri_to_path(uri).read_bytes()
        except ValueError as e:
            return FileHandle(uri, err=OSError(str(e)))
        except OSError as e:
            logger.debug(f"read {uri}: {e}")
            return FileHandle(uri, err=e)
        # Cancellation during the read still wins over a successful result.
        ctx.check()
        return FileHandle(uri, content=content)


class OverlayFileSource:
    """
    Unsaved editor content layered over another FileSource.

    Overlays are replaced wholesale by set_overlay; readers always see
    either the old or the new handle.
    """

    def __init__(self, base: FileSource):
        self.base = base
        self._lock = threading.Lock()
        self._overlays: Dict[DocumentURI, FileHandle] = {}

    def set_overlay(self, uri: DocumentURI, content: bytes, version: int) -> FileHandle:
        handle = FileHandle(uri, content=content, version=version)
        with self._lock:
            self._overlays[uri] = handle
        return handle

    def remove_overlay(self, uri: DocumentURI) -> None:
        with self._lock:
            self._overlays.pop(uri, None)

    def read_file(self, ctx: Context, uri: DocumentURI) -> FileHandle:
        ctx.check()
        with self._lock:
            overlay = self._overlays.get(uri)
        if overlay is not None:
            return overlay
        return self.base.read_file(ctx, uri)
