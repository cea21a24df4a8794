#!/usr/bin/env python3
"""
Command line front end for csg2gltf.

Usage:
    python -m csg2gltf INPUT.json [-o OUTPUT] [--format glb|gltf]
                      [--mesh-name NAME] [--pretty] [--config FILE] [-v]

INPUT holds a JSON-encoded geometry object (``polygons`` or ``sides``) or a
list of them, as exported by a modeling engine.

Examples:
    # Binary container next to the input (part.glb)
    python -m csg2gltf part.json

    # Readable glTF JSON with named meshes
    python -m csg2gltf part.json -o part.gltf --mesh-name part --pretty

    # Options from a YAML file; command line flags win
    python -m csg2gltf part.json --config export.yaml
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from csg2gltf.convert import convert_geometry
from csg2gltf.errors import GltfExportError
from csg2gltf.io.gltf import write_gltf
from csg2gltf.options import ConversionOptions, load_options

logger = logging.getLogger('csg2gltf')


def configure_logging(verbose: bool = False) -> None:
    level_name = 'DEBUG' if verbose else os.getenv('LOG_LEVEL', 'WARNING').upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='csg2gltf',
        description='Convert JSON geometry (polygons or sides) to glTF 2.0.',
    )
    parser.add_argument('input', help='JSON file holding a geometry object or list')
    parser.add_argument('-o', '--output', help='output path (default: INPUT with .glb/.gltf suffix)')
    parser.add_argument('--format', choices=['glb', 'gltf'], default=None,
                        help='output format (default: from output suffix, else glb)')
    parser.add_argument('--mesh-name', default=None, help='base name for meshes and nodes')
    parser.add_argument('--pretty', action='store_true', default=None,
                        help='indent glTF JSON output')
    parser.add_argument('--config', help='YAML or JSON options file')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return parser


def _resolve_format(args, options: ConversionOptions) -> str:
    if args.format:
        return args.format
    if args.output and Path(args.output).suffix.lower() == '.gltf':
        return 'gltf'
    if args.output and Path(args.output).suffix.lower() == '.glb':
        return 'glb'
    return options.format


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    source_path = Path(args.input)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return 1

    try:
        options = load_options(args.config) if args.config else ConversionOptions()
        options = options.merged(
            format=_resolve_format(args, options),
            mesh_name=args.mesh_name,
            pretty_json=args.pretty,
        )
        geometry = json.loads(source_path.read_text(encoding='utf-8'))
        result = convert_geometry(geometry, options)
        output = Path(args.output) if args.output else source_path.with_suffix('.' + result.format)
        write_gltf(result, output)
    except (GltfExportError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info('wrote %s (%d bytes)', output, result.byte_length)
    print(f"Wrote {output} ({result.byte_length} bytes, {result.mime_type})")
    return 0


if __name__ == '__main__':
    sys.exit(main())
