from __future__ import annotations


class StorageError(Exception):
    """A blob store could not be read or written."""
