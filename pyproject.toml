[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shottower"
version = "0.1.0"
description = "Request models, validation and FFmpeg filter-graph building for a JSON video editing API"
requires-python = ">=3.10"
dependencies = []
keywords = ["video", "ffmpeg", "filtergraph", "timeline", "rendering", "editing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["shottower"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
