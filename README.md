# shottower

Building blocks for a JSON-driven video editing service:

- `shottower.config`: base URLs of the edit, serve and download APIs.
- `shottower.responses`: `ImplResponse` (status code and body) and
  helpers for required-field checks.
- `shottower.errors`: the errors raised by validation and
  `default_error_handler`, which maps an error to a response.
- `shottower.middleware`: a WSGI wrapper that logs each request.
- `shottower.fields`, `shottower.assets`, `shottower.asset_responses`:
  dataclass models built from decoded JSON with `from_dict` and checked
  with `validate()`.
- `shottower.filtergraph` and `shottower.ffmpeg`: pieces of an FFmpeg
  `-filter_complex` graph and a builder for the full argument list.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

```python
from shottower.config import EndpointType, ShottowerConfig

cfg = ShottowerConfig("http://localhost:4000", EndpointType.STAGE)
cfg.render_base_url    # "http://localhost:4000/stage"
cfg.serve_base_url     # "http://localhost:4000/serve/stage"
cfg.download_base_url  # "http://localhost:4000/dl/stage"
```

## Models and validation

```python
from shottower.assets import new_asset, assert_asset_required, get_asset_type

asset = new_asset("image", {"type": "image", "src": "logo.png", "crop": {"left": 0.1}})
get_asset_type(asset)          # AssetType.IMAGE
assert_asset_required(asset)   # passes

new_asset("audio", {"type": "audio"}).validate()
# RequiredError: required field [Audio].'src' is zero value.
```

`new_asset` handles the `image`, `html`, `audio` and `luma` types and
returns `None` for any other. A value of the wrong JSON type in a
`from_dict` call raises `TypeAssertionError`.

`shottower.fields` holds `Crop`, `FlipTransformation`, `Font`,
`MergeField`, `LocalResource` and `LocalResourceTrackInfo`;
`shottower.asset_responses` holds `AssetResponseAttributes`,
`AssetResponseData`, `AssetResponse` and `AssetRenderResponse`, which read
the camelCase keys of the JSON documents.

## Errors and responses

```python
from shottower.errors import RequiredError, default_error_handler

default_error_handler(RequiredError("Font", "src"), None)
# ImplResponse(code=422, body="required field [Font].'src' is zero value.")
```

`ParsingError` gives 400, `RequiredError` and `EnumError` give 422, and
any other error keeps the code of the service result passed in (500 when
there is none).

## Request logging

```python
from shottower.middleware import logger

app = logger(wsgi_app, "PostRender")
```

Each call is logged at INFO level through the `logging` module as
`METHOD URI NAME DURATION`.

## Building FFmpeg arguments

Stateless filter pieces live in `shottower.filtergraph`:

```python
from shottower import filtergraph

filtergraph.clip_trim(0, 0, 0, 0, 4.96)
# "[0:v] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0];"

filtergraph.clip_merge(0, 0, 0, [
    "[0:v] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0];",
    "[0:v] scale=w=1024:h=576 [vtrack0c0];",
])
# "[0:v] trim=start=0:end=4.96, setpts=PTS-STARTPTS [vtrack0c0p0];"
# "[vtrack0c0p0] scale=w=1024:h=576 [vtrack0c0];"

filtergraph.output_format_args("mp4", "high", False)
# ["-codec:v", "libx264", "-preset", "slower"]
```

`FFMPEGCommand` in `shottower.ffmpeg` collects sources, tracks and output
settings:

```python
from shottower.ffmpeg import FFMPEGCommand

cmd = FFMPEGCommand(background_color="#000000", output_format="mp4")
cmd.set_output_resolution("sd")
cmd.resolution              # "1024x576"
cmd.generate_background()   # "color=c=#000000:s=1024x576:d=999999"

cmd.add_default_params()
cmd.add_source("clip.mp4", False)
cmd.add_track()
cmd.add_clip(0, cmd.clip_resize(0, 0, 0, 1))
cmd.close_track(0)
args = cmd.to_args()
```

`to_args` creates an empty temporary file with the output format's
extension and puts its path last in the list (numbered PNG frames in the
temporary directory for high-quality GIFs). An output format other than
`mp4` or `gif` raises `ValueError`.

## What this package does not do

It does not run FFmpeg, serve HTTP routes, keep a render queue, or hold
clip, track, timeline or video-asset models; turning a whole edit into
tracks and clips is left to the caller, which feeds the filters to
`FFMPEGCommand` itself.