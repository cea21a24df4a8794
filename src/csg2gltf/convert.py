"""High level conversion entry points.

``convert_geometry`` takes geometry that has already been evaluated by a
modeling engine.  ``convert_plan`` takes an operation plan plus the engine
callable that evaluates it; ``convert_plan_async`` does the same for
engines that evaluate asynchronously.  The encoding itself is always
synchronous.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable

from csg2gltf.errors import NoGeometryError
from csg2gltf.io.gltf import ConversionResult, pack, serialize
from csg2gltf.mesh import triangulate
from csg2gltf.options import OptionsLike, coerce_options

logger = logging.getLogger(__name__)


def convert_geometry(geometry: Any, options: OptionsLike = None, **overrides: Any) -> ConversionResult:
    """Encode ``geometry`` (a geometry object or list of them) as glTF."""

    opts = coerce_options(options, **overrides)
    if geometry is None:
        raise NoGeometryError('no geometry to convert')

    units = triangulate(geometry, opts.mesh_name)
    if not units:
        raise NoGeometryError('geometry produced no mesh units')

    doc, binary = pack(units)
    logger.debug('converting %d mesh unit(s) to %s', len(units), opts.format)
    return serialize(doc, binary, opts.format, opts.pretty_json)


def _check_evaluated(geometry: Any) -> Any:
    if geometry is None or (isinstance(geometry, (list, tuple)) and not geometry):
        raise NoGeometryError('plan evaluation returned no geometry')
    return geometry


def convert_plan(plan: Any, evaluate: Callable[[Any], Any], options: OptionsLike = None,
                 **overrides: Any) -> ConversionResult:
    """Evaluate ``plan`` with ``evaluate`` and encode the resulting geometry."""

    opts = coerce_options(options, **overrides)
    geometry = evaluate(plan)
    if inspect.isawaitable(geometry):
        if inspect.iscoroutine(geometry):
            geometry.close()
        raise TypeError('evaluator is asynchronous; use convert_plan_async')
    return convert_geometry(_check_evaluated(geometry), opts)


async def convert_plan_async(plan: Any, evaluate: Callable[[Any], Any], options: OptionsLike = None,
                             **overrides: Any) -> ConversionResult:
    """Like :func:`convert_plan`, awaiting ``evaluate`` when it is asynchronous."""

    opts = coerce_options(options, **overrides)
    geometry = evaluate(plan)
    if inspect.isawaitable(geometry):
        geometry = await geometry
    return convert_geometry(_check_evaluated(geometry), opts)


__all__ = ['ConversionResult', 'convert_geometry', 'convert_plan', 'convert_plan_async']
