#!/usr/bin/env python3
"""
OBJ Inspection Tool
Parses a Wavefront .obj file and reports its objects, groups, polygons and
triangles, or dumps the parsed model back out as OBJ text
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from logging_config import setup_logging
from mesh_export import to_arrays
from obj_errors import ObjError
from obj_model import ObjModel

logger = logging.getLogger(__name__)


def summarize(model, scale=1.0):
    """
    Count the contents of a model

    Args:
        model: ObjModel
        scale: Scale factor applied to the reported bounds

    Returns:
        dict with buffer sizes, per-object/group counts and bounds
    """
    objects = {}
    for object_name, obj in model.objects():
        groups = {}
        for group_name, group in obj.groups():
            groups[group_name] = {
                'polygons': len(group),
                'triangles': sum(1 for _ in group.triangles()),
            }
        objects[object_name] = groups

    arrays = to_arrays(model, scale=scale)
    bounds = arrays['bounds']
    return {
        'positions': len(model.positions()),
        'uvs': len(model.uvs()),
        'normals': len(model.normals()),
        'polygons': sum(1 for _ in model.polygons()),
        'triangles': len(arrays['faces']),
        'objects': objects,
        'bounds': None if bounds is None else {
            key: [float(v) for v in value] for key, value in bounds.items()
        },
        'scale': scale,
    }


def print_summary(path, summary):
    print(f"File: {path}")
    print(f"  Positions: {summary['positions']}")
    print(f"  Texture coordinates: {summary['uvs']}")
    print(f"  Normals: {summary['normals']}")
    print(f"  Polygons: {summary['polygons']} ({summary['triangles']} triangles)")

    for object_name, groups in summary['objects'].items():
        print(f"\nObject {object_name or '(unnamed)'}")
        for group_name, counts in groups.items():
            print(f"  Group {group_name or '(default)'}: "
                  f"{counts['polygons']} polygons, {counts['triangles']} triangles")

    bounds = summary['bounds']
    if bounds is not None:
        size = bounds['size']
        print(f"\nBounding box size: {size[0]:.4f} x {size[1]:.4f} x {size[2]:.4f} "
              f"(scale {summary['scale']})")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Inspect the objects, groups and polygons of a Wavefront .obj file'
    )
    parser.add_argument('obj_file', help='Path to .obj file')
    parser.add_argument('--dump', action='store_true',
                        help='Print the parsed model as OBJ text instead of a summary')
    parser.add_argument('--json', action='store_true',
                        help='Print the summary as JSON')
    parser.add_argument('--scale', type=float, default=1.0,
                        help='Scale factor for reported bounds (default 1.0)')
    parser.add_argument('--encoding', default='utf-8',
                        help='Text encoding of the file (default utf-8)')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default WARNING)')
    parser.add_argument('--log-file', help='Also write log messages to this file')
    args = parser.parse_args(argv)

    # Machine-readable output owns stdout
    log_stream = sys.stderr if args.dump or args.json else sys.stdout
    setup_logging(getattr(logging, args.log_level), args.log_file, stream=log_stream)

    if not Path(args.obj_file).exists():
        print(f"Error: File not found: {args.obj_file}", file=sys.stderr)
        return 1

    try:
        model = ObjModel.from_file(args.obj_file, encoding=args.encoding)
    except (ObjError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logger.info("Loaded %r", model)

    if args.dump:
        sys.stdout.write(model.dump())
    elif args.json:
        print(json.dumps(summarize(model, args.scale), indent=2))
    else:
        print_summary(args.obj_file, summarize(model, args.scale))
    return 0


if __name__ == '__main__':
    sys.exit(main())
