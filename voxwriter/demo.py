"""Procedural demo scenes: an animated wave and a revolved Julia set."""

from __future__ import annotations

import argparse
import math
from typing import Optional, Sequence

from .writer import VoxWriter

_Z_SCALE = 1.0
_ZOOM_XZ = 7.5
_ZOOM_Y = 7.5
_FULL_TURN = 6.28318


def build_animated_wave(writer: VoxWriter, size: int = 189, frames: int = 30) -> VoxWriter:
    """Add a rippling height field, one key frame per animation step."""
    len_ratio = 1.0 / (size * size)
    phase = 0.0
    for frame in range(frames):
        writer.set_key_frame(frame)
        for i in range(-size, size):
            for j in range(-size, size):
                length = (i * i + j * j) * len_ratio
                height = int(
                    (math.sin(length * 10.0 + phase) * 0.5 + 0.5)
                    * abs(50.0 - 25.0 * length)
                    * _Z_SCALE
                )
                color = int(length * 100.0) % 255 + 1
                writer.add_voxel(i + size, j + size, height, color)
        phase += 0.5
    return writer


def _mix(x: float, y: float, a: float) -> float:
    return x * (1.0 - a) + y * a


def _julia_color(
    rx: float, ry: float, cx: float, cy: float, iterations: int
) -> Optional[int]:
    kk = 1.0
    hh = 1.0
    for _ in range(iterations):
        x2 = rx * rx
        y2 = ry * ry
        hh *= 4.0 * kk
        kk = x2 + y2
        if kk > 4.0:
            break
        ry = 2.0 * rx * ry + cy
        rx = x2 - y2 + cx
    if kk <= 0.0 or hh <= 0.0:
        return None
    distance = math.sqrt(kk / hh) * math.log10(kk)
    if abs(distance) - 0.01 >= 0.0:
        return None
    return int((math.sin(rx + ry) * 0.5 + 0.5) * 6.0) + 249


def build_julia_revolute(
    writer: VoxWriter, size: int = 375, frames: int = 1, iterations: int = 5
) -> VoxWriter:
    """Add the surface of a Julia set revolved around the vertical axis."""
    time_step = _FULL_TURN / frames
    phase = 0.0
    for frame in range(frames):
        writer.set_key_frame(frame)
        phase += time_step
        for i in range(-size, size):
            px = (i * 2.0 / size - 1.0) * _ZOOM_XZ
            for k in range(-size, size):
                pz = (k * 2.0 / size - 1.0) * _ZOOM_XZ
                angle = math.atan2(px, pz)
                cx = _mix(0.2, -0.5, math.sin(angle * 2.0))
                cy = _mix(0.5, 0.0, math.sin(angle * 3.0))
                path = math.sqrt(px * px + pz * pz) - 3.0
                cos_a = math.cos(angle + phase)
                sin_a = math.sin(angle + phase)
                for j in range(-size, size):
                    py = (j * 2.0 / size - 1.0) * _ZOOM_Y
                    rx = cos_a * path - sin_a * py
                    ry = sin_a * path + cos_a * py
                    color = _julia_color(rx, ry, cx, cy, iterations)
                    if color is not None:
                        writer.add_voxel(i + size, k + size, j + size, color)
    return writer


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Build a demo scene, save it as a .vox file and print statistics."""
    parser = argparse.ArgumentParser(prog="voxwriter", description="Write a demo .vox scene.")
    parser.add_argument("scene", nargs="?", choices=("wave", "julia"), default="wave")
    parser.add_argument("--size", type=_positive_int, help="half width of the scene in voxels")
    parser.add_argument("--frames", type=_positive_int, help="number of key frames")
    parser.add_argument("--iterations", type=_positive_int, default=5, help="Julia iterations")
    parser.add_argument("--output", help="path of the .vox file to write")
    args = parser.parse_args(argv)

    writer = VoxWriter()
    if args.scene == "wave":
        writer.set_key_frame_logger(
            lambda frame, secs: print(f"Elapsed time for Frame {frame} : {secs:g} secs")
        )
        writer.start_time_logging()
        build_animated_wave(writer, args.size or 189, args.frames or 30)
        output = args.output or "output_voxwriter.vox"
    else:
        frames = args.frames or 1
        writer.set_key_frame_logger(
            lambda frame, secs: print(
                f"Elapsed time for Frame {frame}/{frames} : {secs:g} secs "
            )
        )
        writer.start_time_logging()
        build_julia_revolute(writer, args.size or 375, frames, args.iterations)
        output = args.output or "julia_revolute.vox"

    writer.stop_time_logging()
    writer.save(output)
    writer.print_stats()
    return 0