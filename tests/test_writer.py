import io
import struct

import pytest

from voxwriter.writer import VoxWriter, errno_message


def _chunks(data):
    offset = 20
    result = []
    while offset < len(data):
        tag = data[offset:offset + 4].decode("ascii")
        size, _children = struct.unpack_from("<iI", data, offset + 4)
        result.append((tag, data[offset + 12:offset + 12 + size]))
        offset += 12 + size
    return result


def _tags(data):
    return [tag for tag, _ in _chunks(data)]


def test_errno_messages():
    assert errno_message(2) == "No such file or directory"
    assert errno_message(13) == "Permission denied"
    assert errno_message(80) == "String was truncated"
    assert errno_message(15) == ""


def test_limits_are_clamped():
    assert VoxWriter(500, 10, 3).limits == (126, 10, 3)
    assert VoxWriter().limits == (126, 126, 126)


def test_zero_limit_rejected():
    with pytest.raises(ValueError):
        VoxWriter(0, 10, 10)


def test_empty_file_header():
    data = VoxWriter().to_bytes()
    magic, version, main, content, children = struct.unpack_from("<4sI4sII", data)
    assert (magic, version, main, content) == (b"VOX ", 150, b"MAIN", 0)
    assert children == len(data) - 20
    assert _tags(data) == ["nTRN", "nGRP"]


def test_single_voxel_layout():
    writer = VoxWriter(10, 10, 10)
    writer.add_voxel(0, 0, 0, 7)
    data = writer.to_bytes()
    assert _tags(data) == ["SIZE", "XYZI", "nTRN", "nGRP", "nTRN", "nSHP"]
    chunks = dict(_chunks(data))
    assert struct.unpack("<3i", chunks["SIZE"]) == (10, 10, 10)
    assert chunks["XYZI"] == struct.pack("<i", 1) + bytes([0, 0, 0, 7])
    assert b"5 5 5" in data
    assert struct.unpack_from("<I", data, 16)[0] == len(data) - 20


def test_group_lists_transform_children():
    writer = VoxWriter(10, 10, 10)
    writer.add_voxel(0, 0, 0, 1)
    writer.add_voxel(15, 0, 0, 1)
    group = [c for t, c in _chunks(writer.to_bytes()) if t == "nGRP"][0]
    node_id, attr_count, child_count = struct.unpack_from("<3i", group)
    assert (node_id, attr_count, child_count) == (1, 0, 2)
    assert struct.unpack_from("<2i", group, 12) == (2, 4)


def test_voxels_split_into_cubes():
    writer = VoxWriter(10, 10, 10)
    writer.add_voxel(0, 0, 0, 7)
    writer.add_voxel(15, 0, 0, 7)
    assert len(writer.cubes) == 2
    assert bytes(writer.cubes[1].xyzis[0].voxels) == bytes([5, 0, 0, 7])
    assert _tags(writer.to_bytes()).count("XYZI") == 2


def test_duplicate_voxel_counted_once_per_frame():
    writer = VoxWriter()
    writer.add_voxel(1, 2, 3, 4)
    writer.add_voxel(1, 2, 3, 9)
    assert writer.voxel_count(0) == 1
    writer.set_key_frame(1)
    writer.add_voxel(1, 2, 3, 4)
    assert writer.voxel_count(1) == 1
    assert writer.voxel_count() == 2
    assert writer.voxel_count(5) == 0


def test_frames_become_models():
    writer = VoxWriter()
    writer.add_voxel(0, 0, 0, 1)
    writer.set_key_frame(3)
    writer.add_voxel(0, 0, 0, 1)
    data = writer.to_bytes()
    assert _tags(data)[:4] == ["SIZE", "XYZI", "SIZE", "XYZI"]
    shape = [c for t, c in _chunks(data) if t == "nSHP"][0]
    assert b"_f" in shape
    assert struct.unpack_from("<i", shape, 8)[0] == 2


def test_palette_chunk():
    writer = VoxWriter()
    writer.add_color(1, 2, 3, 4, 2)
    assert writer.colors[:2] == [0, 0]
    writer.add_voxel(0, 0, 0, 2)
    chunks = dict(_chunks(writer.to_bytes()))
    palette = chunks["RGBA"]
    assert len(palette) == 1024
    assert palette[8:12] == bytes([1, 2, 3, 4])
    assert palette[:8] == bytes(8)


def test_clear_colors_drops_palette():
    writer = VoxWriter()
    writer.add_color(1, 2, 3, 4, 0)
    writer.clear_colors()
    assert "RGBA" not in _tags(writer.to_bytes())


def test_clear_voxels_then_add_again():
    writer = VoxWriter()
    writer.add_voxel(1, 1, 1, 1)
    writer.clear_voxels()
    assert writer.voxel_count() == 0
    assert "XYZI" not in _tags(writer.to_bytes())
    writer.add_voxel(1, 1, 1, 1)
    assert writer.voxel_count() == 1
    assert len(writer.cubes) == 1


@pytest.mark.parametrize(
    "args",
    [(-1, 0, 0, 1), (0, 0, 0, 256), (0, 0, 0, -1)],
)
def test_add_voxel_rejects_bad_values(args):
    with pytest.raises(ValueError):
        VoxWriter().add_voxel(*args)


def test_add_color_rejects_bad_values():
    with pytest.raises(ValueError):
        VoxWriter().add_color(256, 0, 0, 0, 0)


def test_save_round_trip(tmp_path):
    writer = VoxWriter(20, 20, 20)
    for i in range(30):
        writer.add_voxel(i, i, i, 3)
    path = tmp_path / "scene.vox"
    writer.save(path)
    assert path.read_bytes() == writer.to_bytes()


def test_save_to_missing_directory(tmp_path):
    with pytest.raises(OSError):
        VoxWriter().save(tmp_path / "missing" / "scene.vox")


def test_create(tmp_path):
    writer = VoxWriter.create(tmp_path / "ok.vox", 10, 20, 300)
    assert writer.limits == (10, 20, 126)
    assert (tmp_path / "ok.vox").exists()
    with pytest.raises(FileNotFoundError, match="No such file or directory"):
        VoxWriter.create(tmp_path / "missing" / "a.vox", 10, 10, 10)


def test_time_logging_reports_frames():
    calls = []
    writer = VoxWriter()
    writer.set_key_frame_logger(lambda frame, secs: calls.append((frame, secs)))
    writer.start_time_logging()
    writer.set_key_frame(1)
    writer.set_key_frame(1)
    writer.stop_time_logging()
    assert [frame for frame, _ in calls] == [0, 1]
    assert all(secs >= 0 for _, secs in calls)
    assert set(writer.frame_times) == {0, 1}
    assert writer.total_time >= 0
    writer.stop_time_logging()
    assert len(calls) == 2


def test_no_logging_without_start():
    calls = []
    writer = VoxWriter()
    writer.set_key_frame_logger(lambda frame, secs: calls.append(frame))
    writer.set_key_frame(2)
    writer.stop_time_logging()
    assert calls == []
    assert writer.key_frame == 2


def test_print_stats_single_frame():
    writer = VoxWriter()
    writer.add_voxel(0, 0, 0, 1)
    writer.add_voxel(2, 0, 0, 1)
    writer.add_voxel(0, 4, 0, 1)
    out = io.StringIO()
    writer.print_stats(out)
    text = out.getvalue()
    assert "count cubes : 1" in text
    assert "voxels total : 3" in text
    assert "count key frames" not in text


def test_print_stats_multiple_frames():
    writer = VoxWriter()
    writer.add_voxel(0, 0, 0, 1)
    writer.set_key_frame(1)
    writer.add_voxel(0, 0, 0, 1)
    writer.add_voxel(1, 0, 0, 1)
    out = io.StringIO()
    writer.print_stats(out)
    text = out.getvalue()
    assert "count key frames : 2" in text
    assert "voxels count : 2" in text
    assert "voxels total : 3" in text