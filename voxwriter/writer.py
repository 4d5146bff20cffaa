"""Accumulates world-space voxels into MagicaVoxel models and writes .vox files."""

from __future__ import annotations

import math
import struct
import sys
import time
from os import PathLike
from typing import BinaryIO, Callable, Optional, TextIO, Union

from .chunks import (
    GroupNode,
    Model,
    PaletteChunk,
    ShapeNode,
    SizeChunk,
    TransformNode,
    VoxCube,
    XyziChunk,
    chunk_id,
)
from .geometry import Box, Vec3

MV_VERSION = 150
MAX_VOXELS_PER_CUBE = 126
_MIN_CUBE_START = 10_000_000
_PALETTE_ENTRIES_WRITTEN = 255
_RULE = "-----------------------------------------"

PathType = Union[str, "PathLike[str]"]
KeyFrameLogger = Callable[[int, float], None]

_ERRNO_MESSAGES = {
    1: "Operation not permitted",
    2: "No such file or directory",
    3: "No such process",
    4: "Interrupted function",
    5: "I / O error",
    6: "No such device or address",
    7: "Argument list too long",
    8: "Exec format error",
    9: "Bad file number",
    10: "No spawned processes",
    11: "No more processes or not enough memory or maximum nesting level reached",
    12: "Not enough memory",
    13: "Permission denied",
    14: "Bad address",
    16: "Device or resource busy",
    17: "File exists",
    18: "Cross - device link",
    19: "No such device",
    20: "Not a director",
    21: "Is a directory",
    22: "Invalid argument",
    23: "Too many files open in system",
    24: "Too many open files",
    25: "Inappropriate I / O control operation",
    27: "File too large",
    28: "No space left on device",
    29: "Invalid seek",
    30: "Read - only file system",
    31: "Too many links",
    32: "Broken pipe",
    33: "Math argument",
    34: "Result too large",
    36: "Resource deadlock would occur",
    38: "Filename too long",
    39: "No locks available",
    40: "Function not supported",
    41: "Directory not empty",
    42: "Illegal byte sequence",
    80: "String was truncated",
}


def errno_message(code: int) -> str:
    """Human-readable text for an errno value, or an empty string if unknown."""
    return _ERRNO_MESSAGES.get(code, "")


def _elapsed_seconds(start: float, end: float) -> float:
    # Whole milliseconds, truncated, expressed in seconds.
    return int((end - start) * 1000) * 1e-3


def _open_for_writing(path: PathType) -> BinaryIO:
    try:
        return open(path, "wb")
    except OSError as exc:
        code = exc.errno or 0
        message = errno_message(code) or exc.strerror or str(exc)
        raise OSError(code, f"Vox file creation failed, err : {message}", str(path)) from exc


class VoxWriter:
    """Collects coloured voxels in world coordinates and writes them as a .vox scene.

    The world is cut into cubes of at most 126 voxels per side; each cube
    becomes one model per key frame, placed by a transform node.
    """

    def __init__(
        self,
        limit_x: int = MAX_VOXELS_PER_CUBE,
        limit_y: int = MAX_VOXELS_PER_CUBE,
        limit_z: int = MAX_VOXELS_PER_CUBE,
    ) -> None:
        limits = tuple(min(int(v), MAX_VOXELS_PER_CUBE) for v in (limit_x, limit_y, limit_z))
        if any(v < 1 for v in limits):
            raise ValueError("cube limits must be at least 1")
        self.limits: tuple[int, int, int] = limits  # type: ignore[assignment]
        self.colors: list[int] = []
        self.cubes: list[VoxCube] = []
        self.volume = Box.empty()
        self.frame_times: dict[int, float] = {}
        self.total_time = 0.0
        self._cube_ids: dict[tuple[int, int, int], int] = {}
        self._voxels: set[tuple[int, int, int, int]] = set()
        self._min_cube = (_MIN_CUBE_START, _MIN_CUBE_START, _MIN_CUBE_START)
        self._key_frame = 0
        self._logging = False
        self._start_time = 0.0
        self._last_key_frame_time = 0.0
        self._logger: Optional[KeyFrameLogger] = None

    @classmethod
    def create(cls, path: PathType, limit_x: int, limit_y: int, limit_z: int) -> "VoxWriter":
        """Build a writer after checking that ``path`` can be written."""
        writer = cls(limit_x, limit_y, limit_z)
        writer.check(path)
        return writer

    def check(self, path: PathType) -> None:
        """Raise ``OSError`` if ``path`` cannot be opened for writing."""
        with _open_for_writing(path):
            pass

    @property
    def key_frame(self) -> int:
        """The key frame new voxels are added to."""
        return self._key_frame

    def clear_voxels(self) -> None:
        """Forget every voxel and cube added so far."""
        self.cubes.clear()
        self._cube_ids.clear()
        self._voxels.clear()

    def clear_colors(self) -> None:
        """Forget the palette."""
        self.colors.clear()

    def start_time_logging(self) -> None:
        """Start measuring the time spent on each key frame."""
        self._logging = True
        self._start_time = time.monotonic()
        self._last_key_frame_time = self._start_time

    def stop_time_logging(self) -> None:
        """Record the current key frame's time and the total, then stop logging."""
        if not self._logging:
            return
        now = time.monotonic()
        self._record_frame_time(now)
        self.total_time = _elapsed_seconds(self._start_time, now)
        self._logging = False

    def set_key_frame_logger(self, callback: Optional[KeyFrameLogger]) -> None:
        """Set a callable taking (key_frame, seconds), called as each frame ends."""
        self._logger = callback

    def set_key_frame(self, key_frame: int) -> None:
        """Direct subsequent voxels to ``key_frame``."""
        if not 0 <= key_frame <= 0xFFFFFFFF:
            raise ValueError(f"key frame out of range: {key_frame}")
        if key_frame == self._key_frame:
            return
        if self._logging:
            now = time.monotonic()
            self._record_frame_time(now)
            self._last_key_frame_time = now
        self._key_frame = key_frame

    def _record_frame_time(self, now: float) -> None:
        seconds = _elapsed_seconds(self._last_key_frame_time, now)
        self.frame_times[self._key_frame] = seconds
        if self._logger is not None:
            self._logger(self._key_frame, seconds)

    def add_color(self, r: int, g: int, b: int, a: int, index: int) -> None:
        """Set palette entry ``index`` to the given RGBA colour."""
        for name, value in (("r", r), ("g", g), ("b", b), ("a", a), ("index", index)):
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be within 0..255, got {value}")
        if len(self.colors) <= index:
            self.colors.extend([0] * (index + 1 - len(self.colors)))
        self.colors[index] = r | (g << 8) | (b << 16) | (a << 24)

    def add_voxel(self, x: int, y: int, z: int, color_index: int) -> None:
        """Add a voxel at world position (x, y, z) to the current key frame."""
        if min(x, y, z) < 0:
            raise ValueError(f"voxel coordinates must be non-negative: {(x, y, z)}")
        if not 0 <= color_index <= 255:
            raise ValueError(f"colour index must be within 0..255, got {color_index}")
        lx, ly, lz = self.limits
        pos = (x // lx, y // ly, z // lz)
        # The y and z minima are taken against the running x minimum.
        min_x = min(self._min_cube[0], pos[0])
        self._min_cube = (min_x, min(min_x, pos[1]), min(min_x, pos[2]))
        self._merge_voxel(x, y, z, color_index, self._cube_at(pos))

    def _cube_at(self, pos: tuple[int, int, int]) -> VoxCube:
        cube_id = self._cube_ids.get(pos)
        if cube_id is None:
            cube_id = len(self.cubes)
            self._cube_ids[pos] = cube_id
            lx, ly, lz = self.limits
            self.cubes.append(
                VoxCube(
                    id=cube_id,
                    tx=pos[0],
                    ty=pos[1],
                    tz=pos[2],
                    size=SizeChunk(lx, ly, lz),
                )
            )
        return self.cubes[cube_id]

    def _merge_voxel(self, x: int, y: int, z: int, color_index: int, cube: VoxCube) -> None:
        self.volume.combine(Vec3(float(x), float(y), float(z)))
        key = (self._key_frame, x, y, z)
        if key in self._voxels:
            return
        self._voxels.add(key)
        lx, ly, lz = self.limits
        xyzi = cube.xyzis.setdefault(self._key_frame, XyziChunk())
        xyzi.voxels.extend((x % lx, y % ly, z % lz, color_index))

    def to_bytes(self) -> bytes:
        """The complete .vox file content."""
        body = bytearray()
        lx, ly, lz = self.limits
        min_x, min_y, min_z = self._min_cube
        lower = self.volume.lower
        extent = self.volume.size()

        root_transform = TransformNode(node_id=0, child_node_id=1)
        root_group = GroupNode(node_id=1)
        node_id = 1
        model_id = 0
        placed: list[tuple[TransformNode, ShapeNode]] = []

        for cube in self.cubes:
            body += cube.to_bytes()

            node_id += 1
            root_group.children.append(node_id)
            transform = TransformNode(node_id=node_id, child_node_id=node_id + 1, layer_id=0)
            node_id += 1
            tx = math.floor((cube.tx - min_x + 0.5) * lx - lower.x - extent.x * 0.5)
            ty = math.floor((cube.ty - min_y + 0.5) * ly - lower.y - extent.y * 0.5)
            tz = math.floor((cube.tz - min_z + 0.5) * lz)
            transform.frames[0].add("_t", f"{tx} {ty} {tz}")

            shape = ShapeNode(node_id=node_id)
            for frame in sorted(cube.xyzis):
                model = Model(model_id=model_id)
                model.attributes.add("_f", str(frame))
                shape.models.append(model)
                model_id += 1
            placed.append((transform, shape))

        body += root_transform.to_bytes()
        body += root_group.to_bytes()
        for transform, shape in placed:
            body += transform.to_bytes()
            body += shape.to_bytes()

        if self.colors:
            body += PaletteChunk(self.colors[:_PALETTE_ENTRIES_WRITTEN]).to_bytes()

        header = struct.pack(
            "<IiIiI", chunk_id("VOX "), MV_VERSION, chunk_id("MAIN"), 0, len(body)
        )
        return header + bytes(body)

    def save(self, path: PathType) -> None:
        """Write the scene to ``path``."""
        data = self.to_bytes()
        with _open_for_writing(path) as fh:
            fh.write(data)

    def voxel_count(self, key_frame: Optional[int] = None) -> int:
        """Number of voxels in ``key_frame``, or in all key frames if it is None."""
        if key_frame is None:
            return sum(x.num_voxels for cube in self.cubes for x in cube.xyzis.values())
        return sum(
            cube.xyzis[key_frame].num_voxels for cube in self.cubes if key_frame in cube.xyzis
        )

    def print_stats(self, out: Optional[TextIO] = None) -> None:
        """Print a summary of the volume, cubes, voxels and timings."""
        out = sys.stdout if out is None else out
        size = self.volume.size()
        print("---- Stats ------------------------------", file=out)
        print(f"Volume : {size.x:g} x {size.y:g} x {size.z:g}", file=out)
        print(f"count cubes : {len(self.cubes)}", file=out)

        frame_counts: dict[int, int] = {}
        for cube in self.cubes:
            for frame, xyzi in cube.xyzis.items():
                frame_counts[frame] = frame_counts.get(frame, 0) + xyzi.num_voxels

        total = 0
        if len(frame_counts) > 1:
            print(f"count key frames : {len(frame_counts)}", file=out)
            print(_RULE, file=out)
            for frame in sorted(frame_counts):
                count = frame_counts[frame]
                print(f" o--\\-> key frame : {frame}", file=out)
                print(f"     \\-> voxels count : {count}", file=out)
                if frame in self.frame_times:
                    print(f"      \\-> elapsed time : {self.frame_times[frame]:g} secs", file=out)
                total += count
            print(_RULE, file=out)
        elif frame_counts:
            total = next(iter(frame_counts.values()))
        print(f"voxels total : {total}", file=out)
        print(f"total elapsed time : {self.total_time:g} secs", file=out)
        print(_RULE, file=out)