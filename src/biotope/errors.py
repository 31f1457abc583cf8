from __future__ import annotations


class DataFormatError(ValueError):
    """Persisted data is missing a field, cannot be parsed or names an unknown type."""
