"""Pieces of an ffmpeg filter graph: stream labels, per-clip filters and output options."""

from __future__ import annotations

import math
import struct
from decimal import Decimal
from pathlib import PurePath
from typing import Iterable, Sequence

from shottower.fields import Crop

_IMAGE_EXTENSIONS = frozenset({"jpeg", "jpg", "png", "bmp", "gif"})

_MP4_PRESETS = {
    "high": "slower",
    "highest": "veryslow",
    "low": "faster",
    "lower": "ultrafast",
}

_TRACK_PREFIXES = {"audio": "a", "subtitle": "s"}


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def format_number(value: float) -> str:
    """Render a number the shortest way that keeps its single-precision value.

    Integers are written as they are; floats never use exponent notation.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    single = _to_float32(float(value))
    if math.isnan(single):
        return "NaN"
    if math.isinf(single):
        return "+Inf" if single > 0 else "-Inf"
    text = repr(single)
    for digits in range(1, 10):
        candidate = f"{single:.{digits}g}"
        if _to_float32(float(candidate)) == single:
            text = candidate
            break
    formatted = format(Decimal(text), "f")
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    return formatted


def track_name(
    track_type: str, track_number: int, clip_number: int = -1, temp_index: int = -1
) -> str:
    """Label of a track, a clip within it, or an intermediate step of that clip."""
    prefix = _TRACK_PREFIXES.get(track_type, "v")
    base = f"[{prefix}track{track_number}"
    if clip_number == -1:
        return base + "]"
    if temp_index == -1:
        return f"{base}c{clip_number}]"
    return f"{base}c{clip_number}p{temp_index}]"


def overlay_position(position: str) -> str:
    """Translate a named position (topLeft, bottom, ...) into overlay coordinates.

    A position already holding a ':' is taken as coordinates and kept as is.
    """
    if position == "":
        return "x=0:y:0"
    if ":" in position:
        return position
    lowered = position.lower()
    x = "(main_w-overlay_w)/2"
    y = "(main_h-overlay_h)/2"
    if "left" in lowered:
        x = "0"
    if "right" in lowered:
        x = "main_w-overlay_w"
    if "top" in lowered:
        y = "0"
    if "bottom" in lowered:
        y = "main_h-overlay_h"
    return f"x={x}:y={y}"


def crop_overlay_position(crop: Crop) -> str:
    """Overlay coordinates that put a cropped clip back where it was."""
    return f"x=main_w*{format_number(crop.left)}:y=main_h*{format_number(crop.top)}"


def clip_trim(
    source_clip: int, track_number: int, clip_number: int, start: float, length: float
) -> str:
    """Trim the video stream of a source between two points."""
    return (
        f"[{source_clip}:v] trim=start={format_number(start)}:end={format_number(length)}"
        f", setpts=PTS-STARTPTS {track_name('video', track_number, clip_number)};"
    )


def clip_image(
    source_clip: int, track_number: int, clip_number: int, start: float, length: float
) -> str:
    """Trim a looped image source and give it an alpha channel."""
    return (
        f"[{source_clip}:v] trim=start={format_number(start)}:end={format_number(length)}"
        ", setpts=PTS-STARTPTS ,format=yuva420p "
        f"{track_name('video', track_number, clip_number)};"
    )


def clip_crop(source_clip: int, track_number: int, clip_number: int, crop: Crop) -> str:
    """Crop the video stream of a source by relative amounts on each side."""
    left = format_number(crop.left)
    right = format_number(crop.right)
    top = format_number(crop.top)
    bottom = format_number(crop.bottom)
    return (
        f"[{source_clip}:v] crop=in_w-{left}*in_w-{right}*in_w:"
        f"in_h-{top}*in_h-{bottom}*in_h:"
        f"{left}*in_w:{top}*in_h "
        f"{track_name('video', track_number, clip_number)};"
    )


def clip_raw(source_clip: int, track_number: int, clip_number: int) -> str:
    """Pass the video stream of a source through unchanged."""
    return (
        f"[{source_clip}:v] concat=n=1:v=1 "
        f"{track_name('video', track_number, clip_number)};"
    )


def clip_audio_volume(
    source_clip: int, track_number: int, clip_number: int, volume: float
) -> str:
    """Set the volume of the audio stream of a source."""
    return (
        f"[{source_clip}:a]volume={format_number(volume)}"
        f"{track_name('audio', track_number, clip_number)};"
    )


def clip_audio_delay(
    source_clip: int, track_number: int, clip_number: int, delay: float
) -> str:
    """Delay both channels of the audio stream of a source, in milliseconds."""
    text = format_number(delay)
    return (
        f"[{source_clip}:a]adelay={text}|{text}"
        f"{track_name('audio', track_number, clip_number)};"
    )


def clip_audio_trim(
    source_clip: int, track_number: int, clip_number: int, start: float, length: float
) -> str:
    """Trim the audio stream of a source between two points."""
    return (
        f"[{source_clip}:a] atrim=start={format_number(start)}:end={format_number(length)}"
        f", asetpts=PTS-STARTPTS {track_name('audio', track_number, clip_number)};"
    )


def _chain(
    track_type: str,
    source_labels: Sequence[str],
    track_number: int,
    clip_number: int,
    effects: Iterable[str],
) -> str:
    effects = list(effects)
    final_name = track_name(track_type, track_number, clip_number)
    last = len(effects) - 1
    parts = []
    previous = ""
    for index, effect in enumerate(effects):
        current = track_name(track_type, track_number, clip_number, index)
        if previous:
            for label in source_labels:
                effect = effect.replace(label, previous)
        if index != last:
            effect = effect.replace(final_name, current)
        parts.append(effect)
        previous = current
    return "".join(parts)


def clip_merge(
    source_clip: int, track_number: int, clip_number: int, effects: Sequence[str]
) -> str:
    """Chain video effects of one clip so each reads the output of the one before.

    Only the last effect keeps the clip's own label as its output.
    """
    labels = (f"[{source_clip}]", f"[{source_clip}:v]")
    return _chain("video", labels, track_number, clip_number, effects)


def clip_audio_merge(
    source_clip: int, track_number: int, clip_number: int, effects: Sequence[str]
) -> str:
    """Chain audio effects of one clip so each reads the output of the one before."""
    labels = (f"[{source_clip}:a]", f"[{source_clip}]")
    return _chain("audio", labels, track_number, clip_number, effects)


def output_format_args(output_format: str, quality: str, repeat: bool) -> list[str]:
    """Encoder options for an output format and quality.

    Raises ValueError for a format other than mp4 or gif.
    """
    if output_format == "mp4":
        return ["-codec:v", "libx264", "-preset", _MP4_PRESETS.get(quality, "medium")]
    if output_format == "gif":
        if quality != "high" and not repeat:
            return ["-loop", "-1"]
        return []
    raise ValueError("format not handled")


def is_image_path(path: str) -> bool:
    """Tell whether a file name has the extension of a still image."""
    suffix = PurePath(path).suffix
    return suffix[1:] in _IMAGE_EXTENSIONS if suffix else False