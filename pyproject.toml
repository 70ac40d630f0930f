[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mediakit"
version = "0.1.0"
description = "Pull-based media readers: broadcasting, constraint matching and video frame transforms"
requires-python = ">=3.10"
dependencies = []
keywords = ["media", "video", "broadcast", "constraints", "yuv", "i420", "scaling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mediakit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
