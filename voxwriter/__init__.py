"""Writer for MagicaVoxel .vox files with world-mode scene graphs, key frames and demo scenes."""

__version__ = "0.1.0"
__all__ = ["chunks", "demo", "geometry", "writer"]