"""Chunk types of the MagicaVoxel .vox format and their binary encoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

_INT32 = struct.Struct("<i")


def _i32(value: int) -> bytes:
    return _INT32.pack(value)


def chunk_id(tag: str) -> int:
    """Encode a four-character chunk tag as a little-endian integer."""
    raw = tag.encode("ascii")
    if len(raw) != 4:
        raise ValueError(f"chunk tag must be 4 characters, got {tag!r}")
    return int.from_bytes(raw, "little")


def _chunk(tag: str, content: bytes, content_size: int) -> bytes:
    header = struct.pack("<IiI", chunk_id(tag), content_size & 0xFFFFFFFF, 0)
    return header + content


def pack_string(text: str) -> bytes:
    """Encode a string as a 32-bit length followed by its bytes."""
    raw = text.encode("utf-8")
    return _i32(len(raw)) + raw


@dataclass
class VoxDict:
    """An ordered list of string key/value pairs."""

    items: list[tuple[str, str]] = field(default_factory=list)

    def add(self, key: str, value: str) -> None:
        """Append a key/value pair."""
        self.items.append((key, value))

    def byte_size(self) -> int:
        """Number of bytes ``to_bytes`` produces."""
        return len(self.to_bytes())

    def to_bytes(self) -> bytes:
        parts = [_i32(len(self.items))]
        for key, value in self.items:
            parts.append(pack_string(key))
            parts.append(pack_string(value))
        return b"".join(parts)


@dataclass
class TransformNode:
    """An nTRN scene-graph node."""

    node_id: int = 0
    attributes: VoxDict = field(default_factory=VoxDict)
    child_node_id: int = 0
    reserved_id: int = -1
    layer_id: int = -1
    frames: list[VoxDict] = field(default_factory=lambda: [VoxDict()])

    def content_size(self) -> int:
        return 4 * 5 + self.attributes.byte_size() + sum(f.byte_size() for f in self.frames)

    def to_bytes(self) -> bytes:
        content = b"".join(
            [
                _i32(self.node_id),
                self.attributes.to_bytes(),
                _i32(self.child_node_id),
                _i32(self.reserved_id),
                _i32(self.layer_id),
                _i32(len(self.frames)),
                *(f.to_bytes() for f in self.frames),
            ]
        )
        return _chunk("nTRN", content, self.content_size())


@dataclass
class GroupNode:
    """An nGRP scene-graph node listing its children."""

    node_id: int = 0
    attributes: VoxDict = field(default_factory=VoxDict)
    children: list[int] = field(default_factory=list)

    def content_size(self) -> int:
        return 4 * (2 + len(self.children)) + self.attributes.byte_size()

    def to_bytes(self) -> bytes:
        content = b"".join(
            [
                _i32(self.node_id),
                self.attributes.to_bytes(),
                _i32(len(self.children)),
                *(_i32(child) for child in self.children),
            ]
        )
        return _chunk("nGRP", content, self.content_size())


@dataclass
class Model:
    """A model reference inside a shape node."""

    model_id: int = 0
    attributes: VoxDict = field(default_factory=VoxDict)

    def byte_size(self) -> int:
        return 4 + self.attributes.byte_size()

    def to_bytes(self) -> bytes:
        return _i32(self.model_id) + self.attributes.to_bytes()


@dataclass
class ShapeNode:
    """An nSHP scene-graph node holding model references."""

    node_id: int = 0
    attributes: VoxDict = field(default_factory=VoxDict)
    models: list[Model] = field(default_factory=list)

    def content_size(self) -> int:
        return 4 * 2 + self.attributes.byte_size() + sum(m.byte_size() for m in self.models)

    def to_bytes(self) -> bytes:
        content = b"".join(
            [
                _i32(self.node_id),
                self.attributes.to_bytes(),
                _i32(len(self.models)),
                *(m.to_bytes() for m in self.models),
            ]
        )
        return _chunk("nSHP", content, self.content_size())


@dataclass
class Layer:
    """A LAYR chunk."""

    node_id: int = 0
    attributes: VoxDict = field(default_factory=VoxDict)
    reserved_id: int = -1

    def content_size(self) -> int:
        return 4 * 2 + self.attributes.byte_size()

    def to_bytes(self) -> bytes:
        content = _i32(self.node_id) + self.attributes.to_bytes() + _i32(self.reserved_id)
        return _chunk("LAYR", content, self.content_size())


@dataclass
class SizeChunk:
    """A SIZE chunk giving a model's dimensions."""

    x: int = 0
    y: int = 0
    z: int = 0

    def content_size(self) -> int:
        return 4 * 3

    def to_bytes(self) -> bytes:
        content = _i32(self.x) + _i32(self.y) + _i32(self.z)
        return _chunk("SIZE", content, self.content_size())


@dataclass
class XyziChunk:
    """An XYZI chunk: voxels stored as consecutive x, y, z, colour-index bytes."""

    voxels: bytearray = field(default_factory=bytearray)

    @property
    def num_voxels(self) -> int:
        return len(self.voxels) // 4

    def content_size(self) -> int:
        return 4 * (1 + self.num_voxels)

    def to_bytes(self) -> bytes:
        content = _i32(self.num_voxels) + bytes(self.voxels)
        return _chunk("XYZI", content, self.content_size())


_PALETTE_SIZE = 256


@dataclass
class PaletteChunk:
    """An RGBA chunk holding 256 packed colours."""

    colors: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.colors) > _PALETTE_SIZE:
            raise ValueError(f"a palette holds at most {_PALETTE_SIZE} colours")
        self.colors = list(self.colors) + [0] * (_PALETTE_SIZE - len(self.colors))

    def content_size(self) -> int:
        return 4 * _PALETTE_SIZE

    def to_bytes(self) -> bytes:
        content = struct.pack(f"<{_PALETTE_SIZE}I", *(c & 0xFFFFFFFF for c in self.colors))
        return _chunk("RGBA", content, self.content_size())


@dataclass
class VoxCube:
    """One model cell of the world, with voxel data per key frame."""

    id: int = 0
    tx: int = 0
    ty: int = 0
    tz: int = 0
    size: SizeChunk = field(default_factory=SizeChunk)
    xyzis: dict[int, XyziChunk] = field(default_factory=dict)

    def to_bytes(self) -> bytes:
        """A SIZE and XYZI chunk pair for each key frame, in key-frame order."""
        size_bytes = self.size.to_bytes()
        return b"".join(
            size_bytes + self.xyzis[frame].to_bytes() for frame in sorted(self.xyzis)
        )