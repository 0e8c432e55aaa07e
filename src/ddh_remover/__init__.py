"""
ddh-remover - Delete or move the duplicates found by ddh.

Reads the JSON report of duplicate groups written by the ddh duplicate
finder and, for every group, keeps the files selected by a retention policy
and deletes (or moves away) the others.
"""

__version__ = "0.2.0"
__author__ = "ddh-remover Contributors"

from ddh_remover.core.disposer import Disposer
from ddh_remover.core.processor import process_groups
from ddh_remover.core.resolver import RetentionPolicy, resolve

__all__ = ["Disposer", "RetentionPolicy", "process_groups", "resolve", "__version__"]
