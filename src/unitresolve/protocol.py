"""
Document identifiers shared by every layer.

A DocumentURI is a normalized ``file://`` URI string. Two URIs naming the
same file compare equal once produced by uri_from_path.
"""

from pathlib import Path
from typing import NewType, Union
from urllib.parse import quote, unquote, urlparse

DocumentURI = NewType("DocumentURI", str)


def uri_from_path(path: Union[str, Path]) -> DocumentURI:
    """Convert a filesystem path to an absolute file URI."""
    abs_path = Path(path).expanduser().absolute()
    return DocumentURI("file://" + quote(abs_path.as_posix(), safe="/:"))


def uri_to_path(uri: str) -> Path:
    """Convert a file URI back to a filesystem path."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"not a file URI: {uri}")
    return Path(unquote(parsed.path))
