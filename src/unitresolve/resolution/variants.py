"""
Removal of intermediate test variants from candidate lists.
"""

from typing import List, Sequence

from unitresolve.cache.metadata import Metadata


def remove_intermediate_test_variants(metas: Sequence[Metadata]) -> List[Metadata]:
    """
    Return the non-ITV elements of metas, in their original order.

    The input is never modified, so a list shared with the snapshot or
    with other requests can be passed directly.
    """
    return [m for m in metas if not m.is_intermediate_test_variant()]
