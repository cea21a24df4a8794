"""Color parsing for geometry and vertex color fields.

Colors arrive in whatever form the modeling engine produced them: numeric
triples (either 0-1 floats or 0-255 integers), CSS-like hex strings, or
``rgb()``/``rgba()`` strings.  Everything is normalized to an RGB tuple of
floats in ``[0, 1]``.  Unparseable values resolve to ``None`` so callers can
pick their own fallback; nothing in this module raises.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Sequence, Tuple

RGB = Tuple[float, float, float]

WHITE: RGB = (1.0, 1.0, 1.0)

_HEX_DIGITS = re.compile(r'^[0-9a-fA-F]+$')
_RGB_FUNC = re.compile(r'^rgba?\((.*)\)$', re.IGNORECASE | re.DOTALL)


def _to_number(value: Any) -> float:
    if isinstance(value, str):
        value = value.strip()
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _clamp(value: float) -> float:
    if not math.isfinite(value) or value < 0.0:
        return 0.0
    return min(value, 1.0)


def normalize_channel(value: Any) -> float:
    """Return a single channel in ``[0, 1]``.

    Values above 1 are taken to be 8-bit and divided by 255.
    """

    num = _to_number(value)
    if math.isfinite(num) and num > 1.0:
        num /= 255.0
    return _clamp(num)


def _from_sequence(value: Sequence[Any]) -> RGB:
    return (normalize_channel(value[0]),
            normalize_channel(value[1]),
            normalize_channel(value[2]))


def _from_hex(text: str) -> Optional[RGB]:
    digits = text[1:]
    if not digits or not _HEX_DIGITS.match(digits):
        return None
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)
    elif len(digits) not in (6, 8):
        return None
    # alpha, if any, is dropped
    return tuple(int(digits[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def _parse_rgb_channel(text: str) -> Optional[float]:
    text = text.strip()
    if text.endswith('%'):
        num = _to_number(text[:-1])
        if math.isnan(num):
            return None
        return _clamp(num / 100.0)
    num = _to_number(text)
    if math.isnan(num):
        return None
    return normalize_channel(num)


def _from_rgb_function(text: str) -> Optional[RGB]:
    match = _RGB_FUNC.match(text)
    if not match:
        return None
    channels = []
    for part in match.group(1).split(','):
        channel = _parse_rgb_channel(part)
        if channel is not None:
            channels.append(channel)
    if len(channels) < 3:
        return None
    return channels[0], channels[1], channels[2]


def resolve(value: Any) -> Optional[RGB]:
    """Parse ``value`` into an RGB tuple, or return ``None``.

    >>> resolve('#ff0000')
    (1.0, 0.0, 0.0)
    >>> resolve([255, 0, 0])
    (1.0, 0.0, 0.0)
    >>> resolve('not-a-color') is None
    True
    """

    if value is None or isinstance(value, (bool, bytes)):
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.startswith('#'):
            return _from_hex(text)
        return _from_rgb_function(text)
    if isinstance(value, Sequence) or (hasattr(value, '__len__') and hasattr(value, '__getitem__')):
        try:
            if len(value) >= 3:
                return _from_sequence(value)
        except (TypeError, IndexError, KeyError):
            return None
    return None


def resolve_or_default(*candidates: Any, default: RGB = WHITE) -> RGB:
    """Return the first candidate that resolves, otherwise ``default``.

    Candidates are tried in order, so ``resolve_or_default(hint, shape_color)``
    prefers an explicit hint over a geometry's own color and ends at white.
    """

    for candidate in candidates:
        rgb = resolve(candidate)
        if rgb is not None:
            return rgb
    return default


__all__ = ['RGB', 'WHITE', 'normalize_channel', 'resolve', 'resolve_or_default']
