# voxwriter

Build voxel models in plain Python and save them as MagicaVoxel `.vox`
files. The files use the world-mode scene graph. Models that are bigger
than one cube are split into cubes automatically, with at most 126 voxels
per side by default. Each key frame becomes a separate animation frame.
The package depends only on the standard library.

## Installation

```
pip install .
```

## Usage

```python
from voxwriter.writer import VoxWriter

writer = VoxWriter()                    # cube limits default to 126 per axis
writer.add_color(255, 0, 0, 255, 1)     # palette entry 1 is opaque red

for x in range(200):                    # spans two cubes along x
    writer.add_voxel(x, 10, 0, 1)

writer.save("line.vox")
print(writer.voxel_count())             # 200
```

To animate the model, call `set_key_frame(n)` before you add the voxels
of frame `n`:

```python
for frame in range(10):
    writer.set_key_frame(frame)
    writer.add_voxel(frame, 0, 0, 1)
```

### Notes on the `VoxWriter` class

- `VoxWriter(limit_x, limit_y, limit_z)` sets the cube size. A value above
  126 is clamped to 126. A value below 1 raises `ValueError`.
- `add_voxel(x, y, z, color_index)` takes non-negative world coordinates
  and a colour index in 0..255. Anything else raises `ValueError`. If a
  voxel is added a second time at the same position in the same key
  frame, the second call is ignored.
- `add_color(r, g, b, a, index)` sets one palette entry. Every value must
  be in 0..255. Only entries 0 to 254 are written to the file, and the
  palette chunk is left out when no colour has been added.
- `voxel_count(key_frame)` counts the voxels in one frame. With no
  argument it counts the voxels in every frame.
- `clear_voxels()` and `clear_colors()` reset the model and the palette.
- `to_bytes()` returns the finished file as `bytes` without writing it to
  disk. `save(path)` writes it to `path`.
- `VoxWriter.create(path, limit_x, limit_y, limit_z)` and `check(path)`
  test whether `path` can be opened for writing. If it cannot, they raise
  `OSError`. Note that the test creates the file, or truncates it if it
  already exists.
- `errno_message(code)` in `voxwriter.writer` returns the text for an
  error number. For an unknown number it returns an empty string.

### Timing

- `start_time_logging()` starts the clock.
- `set_key_frame_logger(callback)` sets a function that is called with
  `(key_frame, seconds)` each time a frame finishes.
- `stop_time_logging()` closes the last frame and records the total time.
- `print_stats(out)` prints the volume size, the number of cubes, the
  voxel count of each frame, the elapsed times and the total. It writes
  to standard output when `out` is not given.

### Lower-level modules

- `voxwriter.chunks` holds an encoder for each chunk type: `SizeChunk`,
  `XyziChunk`, `TransformNode`, `GroupNode`, `ShapeNode`, `Model`,
  `Layer`, `PaletteChunk`, `VoxDict` and `VoxCube`. It also has the
  helpers `chunk_id` and `pack_string`.
- `voxwriter.geometry` holds `Vec3` and the axis-aligned `Box` that tracks
  the extent of the voxels.

## Demo

```
voxwriter-demo
```

This writes an animated wave of 30 frames to `output_voxwriter.vox` and
prints its statistics.

```
voxwriter-demo julia
```

This writes a Julia set revolved around the vertical axis to
`julia_revolute.vox`. At the default size of 375 this takes a long time.

Options:

- `--size N`: half width of the scene in voxels
- `--frames N`: number of key frames
- `--iterations N`: number of Julia iterations (default 5)
- `--output PATH`: path of the file to write

The scenes can also be built in code with
`voxwriter.demo.build_animated_wave(writer, size, frames)` and
`voxwriter.demo.build_julia_revolute(writer, size, frames, iterations)`.

## What it does not do

The package only writes `.vox` files. It cannot read or parse them.
`to_bytes()` and `save()` never produce layer (`LAYR`) chunks, although
`voxwriter.chunks.Layer` can encode one on its own.