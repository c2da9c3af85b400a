"""Value shapes and scalar rendering.

User-supplied parameter values follow JSON's value model.  Serialization
branches on the *shape* of a value, so every value is first classified into
exactly one :class:`ValueShape`:

* ``SCALAR`` -- ``str``, ``int``, ``float``, ``bool`` or ``None``.
* ``SEQUENCE`` -- a ``list`` or ``tuple``.
* ``MAPPING`` -- a ``dict`` (keys rendered in insertion order).

Scalars are turned into text by :func:`format_scalar`, which prints values
the way a JSON-centric client would (``True`` -> ``true``, ``2.0`` -> ``2``).
"""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping, Sequence
from typing import Any


class ValueShape(str, enum.Enum):
    """Runtime shape of a parameter value."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify_value(value: Any) -> ValueShape:
    """Return the :class:`ValueShape` of *value*.

    Strings and bytes are scalars even though they are sequences in the
    Python sense.
    """
    if isinstance(value, Mapping):
        return ValueShape.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return ValueShape.SEQUENCE
    return ValueShape.SCALAR


def format_scalar(value: Any) -> str:
    """Render a scalar as text.

    Example::

        >>> format_scalar(True)
        'true'
        >>> format_scalar(None)
        'null'
        >>> format_scalar(2.0)
        '2'
        >>> format_scalar(0.5)
        '0.5'
    """
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)
