"""
File-to-package resolution.

Decides which package answers a query about a file, and type-checks it.
"""

from .facade import (
    narrowest_package_for_file,
    widest_package_for_file,
    narrowest_metadata_for_file,
)
from .pipeline import select_package_for_file, select_metadata_for_file
from .selector import Policy, select_metadata
from .variants import remove_intermediate_test_variants

__all__ = [
    "narrowest_package_for_file",
    "widest_package_for_file",
    "narrowest_metadata_for_file",
    "select_package_for_file",
    "select_metadata_for_file",
    "Policy",
    "select_metadata",
    "remove_intermediate_test_variants",
]
