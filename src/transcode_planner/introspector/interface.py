"""Errors raised while reading probe data."""


class ProbeDataError(Exception):
    """Raised when probe data is not a usable ffprobe document."""

    pass
