"""
File-to-package resolution.

Maps a file to the package that should answer a query about it:
candidates from the snapshot -> drop ITVs -> apply the selection policy
-> type-check -> find the file in the result.

Nothing here holds state between calls; all caching and locking is the
snapshot's business, so these functions may be called concurrently.
"""

from typing import Tuple

from unitresolve import bug
from unitresolve.cache.metadata import Metadata
from unitresolve.cache.package import Package
from unitresolve.cache.parsed import ParsedFile
from unitresolve.cache.snapshot import Snapshot
from unitresolve.context import Context, ContextError
from unitresolve.exceptions import InternalConsistencyError
from unitresolve.logging_config import logger
from unitresolve.protocol import DocumentURI
from .selector import Policy, select_metadata
from .variants import remove_intermediate_test_variants


def select_metadata_for_file(
    ctx: Context,
    snapshot: Snapshot,
    uri: DocumentURI,
    policy: Policy,
) -> Metadata:
    """
    Choose the metadata of the package enclosing uri under policy,
    without type-checking anything.

    Raises:
        ContextError: if ctx is done (raised by the snapshot, unchanged).
        NoPackageError: if no non-ITV package contains uri.
    """
    metas = snapshot.metadata_for_file(ctx, uri)
    candidates = remove_intermediate_test_variants(metas)
    md = select_metadata(candidates, policy, uri)
    logger.debug(
        f"{policy.value} package for {uri}: {md.id} "
        f"({len(candidates)} of {len(metas)} candidates after removing ITVs)"
    )
    return md


def select_package_for_file(
    ctx: Context,
    snapshot: Snapshot,
    uri: DocumentURI,
    policy: Policy,
) -> Tuple[Package, ParsedFile]:
    """
    Select the package enclosing uri under policy, type-check it, and
    return it along with the parsed form of uri.

    When type-checking yields several packages, the first is used.

    Raises:
        ContextError: if ctx is done, from whichever call observed it.
        NoPackageError: if no non-ITV package contains uri.
        AnalysisError: or any other error from snapshot.type_check, unchanged.
        InternalConsistencyError: if the type-checked package lacks uri, or
            fails in any other way to produce its parsed file.
    """
    md = select_metadata_for_file(ctx, snapshot, uri, policy)

    pkgs = snapshot.type_check(ctx, md.id)
    if not pkgs:
        bug.report("type_check returned no packages", package_id=md.id, uri=uri, policy=policy.value)
        raise InternalConsistencyError(uri, md.id, policy)
    pkg = pkgs[0]

    try:
        pgf = pkg.file(uri)
    except ContextError:
        raise
    except Exception as e:
        # Metadata says uri is compiled by md, so this can't happen.
        bug.report("selected package lacks its member file", package_id=md.id, uri=uri, policy=policy.value)
        raise InternalConsistencyError(uri, md.id, policy, cause=e) from e

    return pkg, pgf
