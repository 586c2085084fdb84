"""Build the argument list of an ffmpeg run that renders a timeline."""

from __future__ import annotations

import logging
import math
import os
import struct
import tempfile
from dataclasses import dataclass, field
from typing import Optional, Sequence

from shottower import filtergraph
from shottower.filtergraph import format_number, overlay_position, track_name

_log = logging.getLogger(__name__)

# Width, height and frame rate of each named output resolution.
_RESOLUTIONS = {
    "preview": (512, 288, 15.0),
    "mobile": (640, 360, 25.0),
    "sd": (1024, 576, 25.0),
    "hd": (1280, 720, 25.0),
    "1080": (1920, 1080, 25.0),
    "360": (640, 360, 25.0),
    "480": (848, 480, 25.0),
    "540": (960, 540, 25.0),
    "720": (1280, 720, 25.0),
}

_BACKGROUND_FILLER = "yellow@.0"
_OVERLAY_FILLER = "pink@.0"


def _single(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _stream_label(clip: str) -> str:
    """Output label of a filter: its last bracketed name, without the ';'."""
    label = clip[clip.rfind("["):]
    return label[:-1] if label.endswith(";") else label


def _count_labels(joined: str) -> int:
    return len(joined.split(" ")) - 1


@dataclass
class FFMPEGSource:
    """An input file and whether it must be looped (still images)."""

    path: str
    need_loop: bool = False


@dataclass
class FFMPEGTrack:
    """Video and audio filters of one timeline track."""

    video: list[str] = field(default_factory=list)
    audio: list[str] = field(default_factory=list)


@dataclass
class FFMPEGCommand:
    """Accumulates sources, tracks and output settings of one render."""

    sources: list[FFMPEGSource] = field(default_factory=list)
    tracks: list[FFMPEGTrack] = field(default_factory=list)
    default_params: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    output_format: str = ""
    quality: str = ""
    fps: float = 0.0
    repeat: bool = False
    background_color: str = ""
    duration: float = 0.0
    current_id: str = ""
    output_name: str = ""
    has_overlay: bool = False
    filler_counter: int = 0
    overlay_filler_counter: int = 0

    def add_default_params(self) -> None:
        """Start the arguments with the usual banner, log level and overwrite flags."""
        self.default_params = True

    def add_source(self, file_name: str, need_loop: bool) -> None:
        """Register an input file."""
        self.sources.append(FFMPEGSource(path=file_name, need_loop=need_loop))

    def add_clip(self, track_number: int, params: str) -> None:
        """Append a video filter to a track."""
        self.tracks[track_number].video.append(params)

    def add_audio_clip(self, track_number: int, params: str) -> None:
        """Append an audio filter to a track."""
        self.tracks[track_number].audio.append(params)

    def set_output_size(self, width: Optional[int], height: Optional[int]) -> None:
        """Set the output size in pixels."""
        self.width = width
        self.height = height

    def set_output_resolution(self, name: str) -> None:
        """Set size and frame rate from a named resolution; unknown names give zeros."""
        self.width, self.height, self.fps = _RESOLUTIONS.get(name, (0, 0, 0.0))

    @property
    def resolution(self) -> str:
        """Output size as WIDTHxHEIGHT."""
        width = "" if self.width is None else str(self.width)
        height = "" if self.height is None else str(self.height)
        return f"{width}x{height}"

    def clip_filler(
        self, track_number: int, clip_number: int, start: float, length: float
    ) -> str:
        """Transparent filler covering a gap in a track."""
        self.filler_counter += 1
        return (
            f"[filler{self.filler_counter}] trim=start={format_number(start)}"
            f":end={format_number(length)}, setpts=PTS-STARTPTS ,format=yuva420p "
            f"{track_name('video', track_number, clip_number)};"
        )

    def clip_filler_overlay(
        self, source_clip: int, track_number: int, clip_number: int, position: str
    ) -> str:
        """Place a clip at a position over a full-size transparent filler."""
        self.has_overlay = True
        self.overlay_filler_counter += 1
        return (
            f"[overfiller{self.overlay_filler_counter}] [{source_clip}] "
            f"overlay=shortest=1:{overlay_position(position)} "
            f"{track_name('video', track_number, clip_number)};"
        )

    def clip_resize(
        self, source_clip: int, track_number: int, clip_number: int, scale_ratio: float
    ) -> str:
        """Scale a clip to a fraction of the output size."""
        if self.width is None or self.height is None:
            raise ValueError("output size is not set")
        ratio = _single(float(scale_ratio))
        width = format_number(_single(float(self.width)) * ratio)
        height = format_number(_single(float(self.height)) * ratio)
        return (
            f"[{source_clip}] scale=w={width}:h={height} "
            f"{track_name('video', track_number, clip_number)};"
        )

    def clip_subtitle_burn(
        self, source_clip: int, track_number: int, clip_number: int, index: int
    ) -> str:
        """Burn a subtitle stream of a source into its video."""
        subtitle = track_name("subtitle", track_number, clip_number)
        return (
            f"subtitles='{self.sources[source_clip].path}':stream_index={index}"
            f"{subtitle}; [{source_clip}:v] {subtitle} overlay "
            f"{track_name('video', track_number, clip_number)};"
        )

    def clip_merge(
        self,
        source_clip: int,
        track_number: int,
        clip_number: int,
        effects: Sequence[str],
    ) -> str:
        """Chain the video effects of one clip."""
        return filtergraph.clip_merge(source_clip, track_number, clip_number, effects)

    def clip_audio_merge(
        self,
        source_clip: int,
        track_number: int,
        clip_number: int,
        effects: Sequence[str],
    ) -> str:
        """Chain the audio effects of one clip."""
        return filtergraph.clip_audio_merge(
            source_clip, track_number, clip_number, effects
        )

    def generate_background(self) -> str:
        """Source description of the plain background."""
        return f"color=c={self.background_color}:s={self.resolution}:d=999999"

    def generate_filler(self, color: str = "") -> str:
        """Source description of a filler of the given colour."""
        color = color or _BACKGROUND_FILLER
        return f"color=c={color}:s={self.resolution}:d=999999,format=yuva420p"

    def add_track(self) -> None:
        """Append an empty track."""
        self.tracks.append(FFMPEGTrack())

    def close_track(self, track_number: int) -> None:
        """Concatenate the clips of a track into its video and audio outputs."""
        track = self.tracks[track_number]

        video_labels = "".join(f"{_stream_label(clip)} " for clip in track.video if clip)
        if video_labels:
            track.video.append(
                f"{video_labels} concat=n={_count_labels(video_labels)}"
                f":v=1 [vtrack{track_number}];"
            )

        audio_labels = "".join(f"{_stream_label(clip)} " for clip in track.audio if clip)
        if audio_labels:
            track.audio.append(
                f"{audio_labels} amix=inputs={_count_labels(audio_labels)}"
                f" [atrack{track_number}];"
            )

    def overlay_all_tracks(self, missing_video_tracks: Sequence[str]) -> str:
        """Overlay every track that has video on the background, last track first."""
        available = [
            index
            for index in reversed(range(len(self.tracks)))
            if f"[vtrack{index}]" not in missing_video_tracks
        ]
        result = " [bg]"
        previous = ""
        last = len(available) - 1
        for position, index in enumerate(available):
            current = f"[overlay{position}]"
            result += previous
            result += f"[vtrack{index}] overlay=shortest=0:x=0:y=0 "
            result += "[vtracks];" if position == last else f"{current};"
            previous = current
        return result

    def output_format_args(self) -> list[str]:
        """Encoder options for the output format; ValueError if it is not handled."""
        return filtergraph.output_format_args(
            self.output_format, self.quality, self.repeat
        )

    def _source_args(self) -> list[str]:
        args: list[str] = []
        for source in self.sources:
            if source.need_loop:
                args += ["-loop", "1"]
            args += ["-i", source.path]
        if self.filler_counter > 0:
            args += ["-f", "lavfi", "-i", self.generate_filler(_BACKGROUND_FILLER)]
        if self.overlay_filler_counter > 0:
            args += ["-f", "lavfi", "-i", self.generate_filler(_OVERLAY_FILLER)]
        args += ["-f", "lavfi", "-i", self.generate_background()]
        return args

    def _filter_complex(self) -> tuple[str, bool]:
        max_source = len(self.sources) - 1
        added = 0
        parts: list[str] = []

        if self.filler_counter > 0:
            added = 1
            parts.extend(
                f"[{max_source + added}] concat=n=1:v=1,setpts=PTS-STARTPTS,"
                f"format=yuva420p [filler{i}];"
                for i in range(1, self.filler_counter + 1)
            )
        if self.overlay_filler_counter > 0:
            added += 1
            parts.extend(
                f"[{max_source + added}] concat=n=1:v=1,setpts=PTS-STARTPTS,"
                f"format=yuva420p [overfiller{i}];"
                for i in range(1, self.overlay_filler_counter + 1)
            )
        added += 1
        parts.append(
            f"[{max_source + added}] concat=n=1:v=1,setpts=PTS-STARTPTS,"
            f"format=yuv420p [bg0]; [bg0] trim=start=0:end="
            f"{format_number(self.duration)} [bg];"
        )

        graph = "".join(parts)
        missing: list[str] = []
        for index, track in enumerate(self.tracks):
            graph += " ".join(track.video) + " ".join(track.audio)
            name = f"[vtrack{index}]"
            if name not in graph:
                missing.append(name)

        graph += self.overlay_all_tracks(missing)

        audio_tracks = "".join(
            f"[atrack{index}] "
            for index, track in enumerate(self.tracks)
            if track.audio and track.audio[0]
        )
        if audio_tracks:
            graph += (
                f"{audio_tracks} amix=inputs={_count_labels(audio_tracks)} [atracks];"
            )

        if graph.endswith(";"):
            graph = graph[:-1]
        return graph, bool(audio_tracks)

    def _generate_output_name(self) -> str:
        fd, name = tempfile.mkstemp(suffix=f".{self.output_format}")
        os.close(fd)
        self.output_name = name
        return name

    def to_args(self) -> list[str]:
        """Full ffmpeg argument list; creates the temporary output file.

        Raises ValueError when the output format is not handled.
        """
        args: list[str] = []
        if self.default_params:
            args += ["-hide_banner", "-loglevel", "debug", "-y"]

        args += self._source_args()

        graph, has_audio = self._filter_complex()
        args += ["-filter_complex", graph]

        args += ["-map", "[vtracks]"]
        if has_audio:
            args += ["-map", "[atracks]"]

        args += ["-s", self.resolution]
        args += self.output_format_args()
        args += ["-r", format_number(self.fps)]
        args += ["-vsync", "2"]

        output_name = self._generate_output_name()
        if self.output_format == "gif" and self.quality == "high":
            # High quality GIFs are assembled from numbered PNG frames.
            args.append(
                os.path.join(tempfile.gettempdir(), f"{self.current_id}-%06d.png")
            )
        else:
            args.append(output_name)

        _log.debug("%s", "|".join(args))
        return args