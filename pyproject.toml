[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxwriter"
version = "0.1.0"
description = "Write MagicaVoxel .vox files with world-mode scene graphs and key-frame animation"
requires-python = ">=3.10"
dependencies = []
keywords = ["voxel", "magicavoxel", "vox", "3d", "file-format"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
voxwriter-demo = "voxwriter.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["voxwriter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
