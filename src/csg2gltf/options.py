"""Conversion options and options-file loading."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from csg2gltf.io.gltf import FORMAT_GLB, MIME_TYPES

DEFAULT_MESH_NAME = 'JSCADMesh'

# camelCase keys are accepted alongside the field names
_ALIASES = {
    'format': 'format',
    'meshName': 'mesh_name',
    'mesh_name': 'mesh_name',
    'prettyJson': 'pretty_json',
    'pretty_json': 'pretty_json',
}


@dataclass(frozen=True)
class ConversionOptions:
    format: str = FORMAT_GLB
    mesh_name: str = DEFAULT_MESH_NAME
    pretty_json: bool = False

    def __post_init__(self):
        fmt = str(self.format).lower()
        if fmt not in MIME_TYPES:
            raise ValueError("format must be one of {}, got {!r}".format(sorted(MIME_TYPES), self.format))
        object.__setattr__(self, 'format', fmt)
        if not isinstance(self.mesh_name, str) or not self.mesh_name:
            raise ValueError('mesh_name must be a non-empty string, got {!r}'.format(self.mesh_name))
        object.__setattr__(self, 'pretty_json', bool(self.pretty_json))

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self.format]

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> 'ConversionOptions':
        """Build options from a mapping with camelCase or snake_case keys.

        Unknown keys are ignored and ``None`` values fall back to defaults.
        """
        kwargs = {}
        for key, value in (data or {}).items():
            name = _ALIASES.get(key)
            if name is not None and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    def merged(self, **overrides: Any) -> 'ConversionOptions':
        """Return a copy with any non-``None`` overrides applied."""
        changes = {}
        for key, value in overrides.items():
            name = _ALIASES.get(key)
            if name is None:
                raise TypeError('unknown option: {}'.format(key))
            if value is not None:
                changes[name] = value
        return replace(self, **changes) if changes else self


OptionsLike = Union[ConversionOptions, Mapping[str, Any], None]


def coerce_options(options: OptionsLike = None, **overrides: Any) -> ConversionOptions:
    if isinstance(options, ConversionOptions):
        base = options
    else:
        base = ConversionOptions.from_mapping(options)
    return base.merged(**overrides)


def load_options(path: Union[str, Path]) -> ConversionOptions:
    """Read options from a YAML (or ``.json``) file."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"options file not found: {path}")
    with path.open('r', encoding='utf-8') as fp:
        if path.suffix == '.json':
            try:
                data = json.load(fp)
            except json.JSONDecodeError as exc:
                raise ValueError(f"invalid options file {path}: {exc}") from exc
        else:
            import yaml
            try:
                data = yaml.safe_load(fp) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"invalid options file {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ValueError(f"options file {path} must contain a mapping")
    return ConversionOptions.from_mapping(data)


__all__ = ['DEFAULT_MESH_NAME', 'ConversionOptions', 'coerce_options', 'load_options']
