"""Domain models and enums for Transcode Planner.

This package contains the probe snapshot types consumed by the evaluators:

- Domain models: ProbeStream, ProbeFormat, MediaFile
- Domain enums: StreamType, FileMedium

Usage:
    from transcode_planner.domain import MediaFile, ProbeStream, StreamType
"""

from .enums import FileMedium, StreamType
from .models import (
    UNDEFINED_LANGUAGE,
    MediaFile,
    ProbeFormat,
    ProbeStream,
)

__all__ = [
    # Models
    "MediaFile",
    "ProbeFormat",
    "ProbeStream",
    "UNDEFINED_LANGUAGE",
    # Enums
    "FileMedium",
    "StreamType",
]
