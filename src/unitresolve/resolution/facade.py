"""
Public API for file-to-package resolution.

Type-checking is expensive. Use snapshot.parse_go if all you need is a
parse tree, or narrowest_metadata_for_file if you only need to know
which package a file belongs to.
"""

from typing import Tuple

from unitresolve.cache.metadata import Metadata
from unitresolve.cache.package import Package
from unitresolve.cache.parsed import ParsedFile
from unitresolve.cache.snapshot import Snapshot
from unitresolve.context import Context
from unitresolve.protocol import DocumentURI
from unitresolve.tracing import trace
from .pipeline import select_metadata_for_file, select_package_for_file
from .selector import Policy


@trace
def narrowest_package_for_file(
    ctx: Context,
    snapshot: Snapshot,
    uri: DocumentURI,
) -> Tuple[Package, ParsedFile]:
    """
    Type-check the narrowest non-ITV package containing uri and return it
    with the parse tree of uri.

    The narrowest package is the one with the fewest files. This solves the
    problem of test variants, as the test package has more files than the
    package under test.

    An intermediate test variant (ITV) has identical source to a regular
    package but resolves imports differently; it is never type-checked.

    Args:
        ctx: Request context; cancellation aborts the call
        snapshot: Workspace state to resolve against
        uri: File to resolve

    Returns:
        (package, parsed file)
    """
    return select_package_for_file(ctx, snapshot, uri, Policy.NARROWEST)


@trace
def widest_package_for_file(
    ctx: Context,
    snapshot: Snapshot,
    uri: DocumentURI,
) -> Tuple[Package, ParsedFile]:
    """
    Type-check the widest non-ITV package containing uri and return it
    with the parse tree of uri.

    The widest package is the one with the most files, which is the test
    variant if one exists.
    """
    return select_package_for_file(ctx, snapshot, uri, Policy.WIDEST)


@trace
def narrowest_metadata_for_file(
    ctx: Context,
    snapshot: Snapshot,
    uri: DocumentURI,
) -> Metadata:
    """
    Return metadata for the narrowest package containing uri.

    The result may be a test variant, but never an ITV. Nothing is
    type-checked, so this is much cheaper than narrowest_package_for_file.
    """
    return select_metadata_for_file(ctx, snapshot, uri, Policy.NARROWEST)
