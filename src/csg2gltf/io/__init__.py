"""I/O utilities for csg2gltf."""

from .gltf import pack, read_glb, serialize, write_gltf

__all__ = ['pack', 'read_glb', 'serialize', 'write_gltf']
