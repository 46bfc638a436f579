"""Disk-backed memoising cache cells.

This package provides :class:`CacheCell`, which wraps a fallible refresh
operation and keeps its last good result as JSON on disk, and
:func:`is_stale`, the freshness rule the cell applies to the file's
modification time.
"""

from cachecell.cache.cell import CacheCell, is_stale

__all__ = ["CacheCell", "is_stale"]
