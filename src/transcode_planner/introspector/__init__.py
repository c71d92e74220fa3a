"""Introspector module for Transcode Planner.

This module turns ffprobe JSON output into probe snapshots:

- parse_probe_data: Parse an ffprobe document into a MediaFile
- load_probe_file: Read and parse an ffprobe JSON file
- classify_resolution: Bucket frame dimensions into a resolution label
- ProbeDataError: Exception for unusable probe data
"""

from transcode_planner.introspector.interface import ProbeDataError
from transcode_planner.introspector.mappings import (
    classify_resolution,
    map_container,
    map_stream_type,
)
from transcode_planner.introspector.parsers import (
    classify_file_medium,
    load_probe_file,
    parse_format,
    parse_probe_data,
    parse_stream,
)

__all__ = [
    "ProbeDataError",
    "classify_file_medium",
    "classify_resolution",
    "load_probe_file",
    "map_container",
    "map_stream_type",
    "parse_format",
    "parse_probe_data",
    "parse_stream",
]
