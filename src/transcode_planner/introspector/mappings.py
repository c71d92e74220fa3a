"""Pure mapping functions for ffprobe to Transcode Planner conversions.

These functions have no side effects and no external dependencies,
making them trivially testable.
"""

from transcode_planner.domain import StreamType

# Track type mapping from ffprobe codec_type to StreamType
FFPROBE_TO_STREAM_TYPE: dict[str, StreamType] = {
    "video": StreamType.VIDEO,
    "audio": StreamType.AUDIO,
    "subtitle": StreamType.SUBTITLE,
    "data": StreamType.DATA,
    "attachment": StreamType.ATTACHMENT,
}


def map_stream_type(codec_type: str | None) -> StreamType:
    """Map ffprobe codec_type to StreamType.

    Args:
        codec_type: The codec_type from ffprobe.

    Returns:
        Matching StreamType, or StreamType.OTHER for unknown types.
    """
    if not codec_type:
        return StreamType.OTHER
    return FFPROBE_TO_STREAM_TYPE.get(codec_type.strip().casefold(), StreamType.OTHER)


# First token of ffprobe format_name mapped to a file extension
FORMAT_NAME_TO_EXTENSION: dict[str, str] = {
    "matroska": "mkv",
    "webm": "webm",
    "mov": "mp4",
    "mp4": "mp4",
    "avi": "avi",
    "mpegts": "ts",
    "flv": "flv",
    "asf": "wmv",
    "ogg": "ogg",
    "mpeg": "mpg",
}


def map_container(format_name: str | None) -> str | None:
    """Map ffprobe format_name (e.g. "matroska,webm") to a container extension.

    Args:
        format_name: The format_name from ffprobe.

    Returns:
        Extension without a leading dot, or None if format_name is empty.
    """
    if not format_name:
        return None
    first = format_name.split(",")[0].strip().casefold()
    return FORMAT_NAME_TO_EXTENSION.get(first, first or None)


# Resolution labels produced by classify_resolution
RESOLUTION_480P = "480p"
RESOLUTION_576P = "576p"
RESOLUTION_720P = "720p"
RESOLUTION_1080P = "1080p"
RESOLUTION_4KUHD = "4KUHD"
RESOLUTION_DCI4K = "DCI4K"
RESOLUTION_8KUHD = "8KUHD"
RESOLUTION_OTHER = "Other"


def classify_resolution(width: int | None, height: int | None) -> str:
    """Bucket frame dimensions into a resolution label.

    Either dimension reaching a tier's threshold selects it, so cropped
    scope content (e.g. 1920x800) lands in the tier of its width.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.

    Returns:
        One of 480p, 576p, 720p, 1080p, 4KUHD, DCI4K, 8KUHD, or Other when
        the dimensions are unknown.
    """
    if not width or not height:
        return RESOLUTION_OTHER
    if width >= 7680 or height >= 4320:
        return RESOLUTION_8KUHD
    if width >= 4096:
        return RESOLUTION_DCI4K
    if width >= 3200 or height >= 1600:
        return RESOLUTION_4KUHD
    if width >= 1600 or height >= 900:
        return RESOLUTION_1080P
    if width >= 1100 or height >= 650:
        return RESOLUTION_720P
    if height > 480:
        return RESOLUTION_576P
    return RESOLUTION_480P
