"""
Choosing one package from the ordered candidates enclosing a file.
"""

from enum import Enum
from typing import Sequence

from unitresolve.cache.metadata import Metadata
from unitresolve.exceptions import NoPackageError
from unitresolve.protocol import DocumentURI


class Policy(str, Enum):
    """
    Which enclosing package answers a query.

    NARROWEST is the package with the fewest files, i.e. the one the user
    is editing; hover and completion use it. WIDEST is the package with
    the most files, which is the test variant whenever one exists.
    """
    NARROWEST = "narrowest"
    WIDEST = "widest"


def select_metadata(metas: Sequence[Metadata], policy: Policy, uri: DocumentURI) -> Metadata:
    """
    Pick one element of metas, which must already be free of ITVs and
    ordered by file count ascending.

    Raises:
        NoPackageError: if metas is empty.
    """
    if not metas:
        raise NoPackageError(uri, policy)
    if policy is Policy.NARROWEST:
        return metas[0]
    if policy is Policy.WIDEST:
        return metas[-1]
    raise ValueError(f"unknown selection policy {policy!r}")
