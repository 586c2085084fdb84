import os
import tempfile

import pytest

from shottower.ffmpeg import FFMPEGCommand, FFMPEGSource


@pytest.fixture
def ff():
    return FFMPEGCommand()


@pytest.fixture
def tmp_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


def test_merge_one_effect(ff):
    effects = ["[0:v] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0];"]
    assert ff.clip_merge(0, 0, 0, effects) == (
        "[0:v] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0];"
    )


def test_merge_two_effects_video_only(ff):
    effects = [
        "[0:v] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0];",
        "[0:v] scale=w=1024:h=576 [vtrack0c0];",
    ]
    assert ff.clip_merge(0, 0, 0, effects) == (
        "[0:v] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0p0];"
        "[vtrack0c0p0] scale=w=1024:h=576 [vtrack0c0];"
    )


def test_merge_three_effects_video_only(ff):
    effects = [
        "[1:v] trim=start=5:end=9.96, setpts=PTS-STARTPTS [vtrack0c1];",
        "[1] scale=w=448:h=252 [vtrack0c1];",
        "[filler] [1:v] overlay=shortest [vtrack0c1];",
    ]
    assert ff.clip_merge(1, 0, 1, effects) == (
        "[1:v] trim=start=5:end=9.96, setpts=PTS-STARTPTS [vtrack0c1p0];"
        "[vtrack0c1p0] scale=w=448:h=252 [vtrack0c1p1];"
        "[filler] [vtrack0c1p1] overlay=shortest [vtrack0c1];"
    )


def test_merge_two_effects_full_stream(ff):
    effects = [
        "[0] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0];",
        "[0] scale=w=1024:h=576 [vtrack0c0];",
    ]
    assert ff.clip_merge(0, 0, 0, effects) == (
        "[0] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0p0];"
        "[vtrack0c0p0] scale=w=1024:h=576 [vtrack0c0];"
    )


@pytest.mark.parametrize(
    "name, expected",
    [
        ("preview", "512x288"),
        ("mobile", "640x360"),
        ("sd", "1024x576"),
        ("hd", "1280x720"),
        ("1080", "1920x1080"),
        ("360", "640x360"),
        ("480", "848x480"),
        ("540", "960x540"),
        ("720", "1280x720"),
    ],
)
def test_set_output_resolution(ff, name, expected):
    ff.set_output_resolution(name)
    assert ff.resolution == expected


def test_resolution_sets_fps(ff):
    ff.set_output_resolution("preview")
    assert ff.fps == 15.0
    ff.set_output_resolution("hd")
    assert ff.fps == 25.0


def test_unknown_resolution_gives_zeros(ff):
    ff.set_output_resolution("huge")
    assert ff.resolution == "0x0"
    assert ff.fps == 0.0


@pytest.mark.parametrize(
    "quality, preset",
    [
        ("medium", "medium"),
        ("high", "slower"),
        ("highest", "veryslow"),
        ("low", "faster"),
        ("lower", "ultrafast"),
    ],
)
def test_mp4_output_quality(ff, quality, preset):
    ff.output_format = "mp4"
    ff.quality = quality
    assert ff.output_format_args() == ["-codec:v", "libx264", "-preset", preset]


def test_unknown_output_format_raises(ff):
    ff.output_format = "avi"
    with pytest.raises(ValueError):
        ff.output_format_args()


def test_set_output_size(ff):
    ff.set_output_size(30, 20)
    assert ff.resolution == "30x20"


def test_overlay_one_of_one(ff):
    ff.add_track()
    assert ff.overlay_all_tracks([]) == (
        " [bg][vtrack0] overlay=shortest=0:x=0:y=0 [vtracks];"
    )


def test_overlay_one_of_two(ff):
    ff.add_track()
    ff.add_track()
    assert ff.overlay_all_tracks(["[vtrack0]"]) == (
        " [bg][vtrack1] overlay=shortest=0:x=0:y=0 [vtracks];"
    )


def test_overlay_two_of_two(ff):
    ff.add_track()
    ff.add_track()
    assert ff.overlay_all_tracks([]) == (
        " [bg][vtrack1] overlay=shortest=0:x=0:y=0 [overlay0];"
        "[overlay0][vtrack0] overlay=shortest=0:x=0:y=0 [vtracks];"
    )


def test_overlay_two_of_three(ff):
    for _ in range(3):
        ff.add_track()
    assert ff.overlay_all_tracks(["[vtrack1]"]) == (
        " [bg][vtrack2] overlay=shortest=0:x=0:y=0 [overlay0];"
        "[overlay0][vtrack0] overlay=shortest=0:x=0:y=0 [vtracks];"
    )


def test_generate_background(ff):
    ff.set_output_resolution("480")
    ff.background_color = "#FFFFFF"
    assert ff.generate_background() == "color=c=#FFFFFF:s=848x480:d=999999"


def test_generate_filler_with_color(ff):
    ff.set_output_resolution("480")
    assert ff.generate_filler("#FFFFFF") == (
        "color=c=#FFFFFF:s=848x480:d=999999,format=yuva420p"
    )


def test_generate_filler_without_color(ff):
    ff.set_output_resolution("480")
    assert ff.generate_filler("") == (
        "color=c=yellow@.0:s=848x480:d=999999,format=yuva420p"
    )


def test_audio_merge_one_effect(ff):
    effects = ["[0:a] atrim=start=0:end=4.96, asetpts=PTS-STARTPTS [atrack0c0];"]
    assert ff.clip_audio_merge(0, 0, 0, effects) == (
        "[0:a] atrim=start=0:end=4.96, asetpts=PTS-STARTPTS [atrack0c0];"
    )


def test_audio_merge_two_effects(ff):
    effects = [
        "[0:a] atrim=start=0:end=4.96, asetpts=PTS-STARTPTS [atrack0c0];",
        "[0:a] volume=0.5 [atrack0c0];",
    ]
    assert ff.clip_audio_merge(0, 0, 0, effects) == (
        "[0:a] atrim=start=0:end=4.96, asetpts=PTS-STARTPTS [atrack0c0p0];"
        "[atrack0c0p0] volume=0.5 [atrack0c0];"
    )


def test_audio_merge_three_effects(ff):
    effects = [
        "[1:a] atrim=start=5:end=9.96, asetpts=PTS-STARTPTS [atrack0c1];",
        "[1] volume=0.5 [atrack0c1];",
        "[filler] [1:a] amix=inputs=2 [atrack0c1];",
    ]
    assert ff.clip_audio_merge(1, 0, 1, effects) == (
        "[1:a] atrim=start=5:end=9.96, asetpts=PTS-STARTPTS [atrack0c1p0];"
        "[atrack0c1p0] volume=0.5 [atrack0c1p1];"
        "[filler] [atrack0c1p1] amix=inputs=2 [atrack0c1];"
    )


def test_clip_filler_counts(ff):
    first = ff.clip_filler(0, 0, 0, 2.5)
    second = ff.clip_filler(1, 3, 0, 1)
    assert first == (
        "[filler1] trim=start=0:end=2.5, setpts=PTS-STARTPTS ,format=yuva420p "
        "[vtrack0c0];"
    )
    assert second.startswith("[filler2] ")
    assert second.endswith("[vtrack1c3];")
    assert ff.filler_counter == 2


def test_clip_filler_overlay(ff):
    result = ff.clip_filler_overlay(2, 0, 1, "topLeft")
    assert result == "[overfiller1] [2] overlay=shortest=1:x=0:y=0 [vtrack0c1];"
    assert ff.has_overlay
    assert ff.overlay_filler_counter == 1


def test_clip_resize(ff):
    ff.set_output_size(1024, 576)
    assert ff.clip_resize(1, 0, 1, 0.4375) == "[1] scale=w=448:h=252 [vtrack0c1];"


def test_clip_resize_without_size_raises(ff):
    with pytest.raises(ValueError):
        ff.clip_resize(0, 0, 0, 1)


def test_clip_subtitle_burn(ff):
    ff.add_source("movie.mkv", False)
    assert ff.clip_subtitle_burn(0, 0, 0, 2) == (
        "subtitles='movie.mkv':stream_index=2[strack0c0]; "
        "[0:v] [strack0c0] overlay [vtrack0c0];"
    )


def test_add_source(ff):
    ff.add_source("logo.png", True)
    assert ff.sources == [FFMPEGSource(path="logo.png", need_loop=True)]


def test_close_track_concatenates(ff):
    ff.add_track()
    ff.add_clip(0, "[0:v] trim=start=0:end=5, setpts=PTS-STARTPTS [vtrack0c0];")
    ff.add_clip(0, "")
    ff.add_clip(0, "[1:v] trim=start=0:end=5, setpts=PTS-STARTPTS [vtrack0c1];")
    ff.add_audio_clip(0, "[0:a]volume=0.5[atrack0c0];")
    ff.close_track(0)
    assert ff.tracks[0].video[-1] == (
        "[vtrack0c0] [vtrack0c1]  concat=n=2:v=1 [vtrack0];"
    )
    assert ff.tracks[0].audio[-1] == "[atrack0c0]  amix=inputs=1 [atrack0];"


def test_close_empty_track_adds_nothing(ff):
    ff.add_track()
    ff.close_track(0)
    assert ff.tracks[0].video == []
    assert ff.tracks[0].audio == []


def _single_track_command():
    ff = FFMPEGCommand()
    ff.add_source("a.mp4", False)
    ff.add_track()
    ff.add_clip(0, "[0:v] trim=start=0:end=5, setpts=PTS-STARTPTS [vtrack0c0];")
    ff.close_track(0)
    ff.set_output_size(10, 10)
    ff.fps = 25.0
    ff.output_format = "mp4"
    ff.background_color = "#000000"
    ff.duration = 5.0
    return ff


def test_to_args_full(tmp_tempdir):
    ff = _single_track_command()
    ff.add_default_params()
    args = ff.to_args()
    graph = (
        "[1] concat=n=1:v=1,setpts=PTS-STARTPTS,format=yuv420p [bg0]; "
        "[bg0] trim=start=0:end=5 [bg];"
        "[0:v] trim=start=0:end=5, setpts=PTS-STARTPTS [vtrack0c0]; "
        "[vtrack0c0]  concat=n=1:v=1 [vtrack0];"
        " [bg][vtrack0] overlay=shortest=0:x=0:y=0 [vtracks]"
    )
    assert args[:-1] == [
        "-hide_banner", "-loglevel", "debug", "-y",
        "-i", "a.mp4",
        "-f", "lavfi", "-i", "color=c=#000000:s=10x10:d=999999",
        "-filter_complex", graph,
        "-map", "[vtracks]",
        "-s", "10x10",
        "-codec:v", "libx264", "-preset", "medium",
        "-r", "25",
        "-vsync", "2",
    ]
    assert args[-1] == ff.output_name
    assert args[-1].endswith(".mp4")
    assert os.path.dirname(args[-1]) == str(tmp_tempdir)
    assert os.path.exists(args[-1])


def test_to_args_with_audio_and_fillers(tmp_tempdir):
    ff = FFMPEGCommand()
    ff.add_source("a.mp4", False)
    ff.add_source("b.png", True)
    ff.add_track()
    ff.add_clip(0, ff.clip_filler(0, 0, 0, 1))
    ff.add_clip(0, ff.clip_filler_overlay(1, 0, 1, "center"))
    ff.add_audio_clip(0, "[0:a]volume=1[atrack0c0];")
    ff.close_track(0)
    ff.set_output_size(4, 4)
    ff.output_format = "mp4"
    args = ff.to_args()
    assert args[:4] == ["-i", "a.mp4", "-loop", "1"]
    assert args[4:6] == ["-i", "b.png"]
    assert args[6:10] == [
        "-f", "lavfi", "-i", "color=c=yellow@.0:s=4x4:d=999999,format=yuva420p",
    ]
    assert args[10:14] == [
        "-f", "lavfi", "-i", "color=c=pink@.0:s=4x4:d=999999,format=yuva420p",
    ]
    graph = args[args.index("-filter_complex") + 1]
    assert graph.startswith(
        "[2] concat=n=1:v=1,setpts=PTS-STARTPTS,format=yuva420p [filler1];"
        "[3] concat=n=1:v=1,setpts=PTS-STARTPTS,format=yuva420p [overfiller1];"
        "[4] concat=n=1:v=1,setpts=PTS-STARTPTS,format=yuv420p [bg0];"
    )
    assert graph.endswith("[atrack0]  amix=inputs=1 [atracks]")
    assert args.count("-map") == 2
    assert "[atracks]" in args


def test_to_args_high_quality_gif_writes_frames(tmp_tempdir):
    ff = _single_track_command()
    ff.output_format = "gif"
    ff.quality = "high"
    ff.current_id = "render1"
    args = ff.to_args()
    assert args[-1] == os.path.join(str(tmp_tempdir), "render1-%06d.png")
    assert "-loop" not in args
    assert ff.output_name.endswith(".gif")


def test_to_args_gif_loops_once(tmp_tempdir):
    ff = _single_track_command()
    ff.output_format = "gif"
    args = ff.to_args()
    position = args.index("-s")
    assert args[position + 2:position + 4] == ["-loop", "-1"]
    assert args[-1].endswith(".gif")


def test_to_args_unknown_format_raises(tmp_tempdir):
    ff = _single_track_command()
    ff.output_format = "webm"
    with pytest.raises(ValueError):
        ff.to_args()
    assert ff.output_name == ""