"""OpenAPI ``style`` / ``explode`` serialization for each parameter location.

Each location has a rule table keyed by ``(style, shape)``.  A table cell
holds two renderers, one for ``explode=false`` and one for
``explode=true``; every renderer takes the parameter name and its value and
returns the serialized text.  Keeping the matrix as data makes every cell
addressable and testable on its own:

============ ================ ================== ===================== ====================== =======================
location     style            array, explode=no  array, explode=yes    object, explode=no     object, explode=yes
============ ================ ================== ===================== ====================== =======================
path         simple           ``v1,v2``          ``v1,v2``             ``k1,v1,k2,v2``        ``k1=v1,k2=v2``
path         label            ``.v1,v2``         ``.v1.v2``            ``.k1,v1,k2,v2``       ``.k1=v1.k2=v2``
path         matrix           ``;n=v1,v2``       ``;n=v1;n=v2``        ``;k1,v1,k2,v2``       ``;k1=v1;k2=v2``
query        form             ``n=v1,v2``        ``n=v1&n=v2``         ``n=k1,v1,k2,v2``      ``k1=v1&k2=v2``
query        spaceDelimited   ``n=v1%20v2``      ``n=v1&n=v2``         (form)                 (form)
query        pipeDelimited    ``n=v1|v2``        ``n=v1&n=v2``         (form)                 (form)
query        deepObject       --                 --                    ``n=k1,v1,k2,v2``      ``n[k1]=v1&n[k2]=v2``
header       simple           ``v1,v2``          ``v1,v2``             ``k1,v1,k2,v2``        ``k1=v1,k2=v2``
cookie       form             ``n=v1,v2``        ``n=v1,v2``           ``n=k1,v1,k2,v2``      ``n=k1,v1,k2,v2``
============ ================ ================== ===================== ====================== =======================

Scalars render as ``v`` (path simple, header), ``.v`` (label), ``;n=v``
(matrix) and ``n=v`` (query, cookie).  Header arrays and every cookie cell
ignore ``explode``.  A ``(style, shape)`` pair with no cell, such as a
``deepObject`` given an array, raises
:class:`~tryout.exceptions.MalformedValueShape`.

Values are not percent-encoded; the text is exactly what the rules produce.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from tryout.exceptions import MalformedValueShape
from tryout.models import ParameterLocation, ParameterSchema
from tryout.request.registry import ParameterRegistry
from tryout.values import ValueShape, classify_value, format_scalar

Renderer = Callable[[str, Any], str]
Rule = tuple[Renderer, Renderer]
"""``(renderer for explode=false, renderer for explode=true)``."""

_SEQ = ValueShape.SEQUENCE
_MAP = ValueShape.MAPPING
_SCALAR = ValueShape.SCALAR


# ---------------------------------------------------------------------------
# Value flattening
# ---------------------------------------------------------------------------


def _items(name: str, values: Any) -> list[str]:
    """Render the elements of a sequence, which must all be scalars."""
    rendered = []
    for item in values:
        if classify_value(item) is not _SCALAR:
            raise MalformedValueShape(
                f"Parameter '{name}': array elements must be scalars, "
                f"got {type(item).__name__}"
            )
        rendered.append(format_scalar(item))
    return rendered


def _pairs(name: str, mapping: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Render the entries of a mapping, whose values must all be scalars."""
    rendered = []
    for key, value in mapping.items():
        if classify_value(value) is not _SCALAR:
            raise MalformedValueShape(
                f"Parameter '{name}': object property '{key}' must be a scalar, "
                f"got {type(value).__name__}"
            )
        rendered.append((format_scalar(key), format_scalar(value)))
    return rendered


def _flat(name: str, mapping: Mapping[str, Any]) -> str:
    """``{k1: v1, k2: v2}`` -> ``k1,v1,k2,v2``."""
    return ",".join(part for pair in _pairs(name, mapping) for part in pair)


def _joined_pairs(name: str, mapping: Mapping[str, Any], sep: str, prefix: str = "") -> str:
    """``{k1: v1, k2: v2}`` -> ``<prefix>k1=v1<sep><prefix>k2=v2``."""
    return sep.join(f"{prefix}{key}={value}" for key, value in _pairs(name, mapping))


def _same(renderer: Renderer) -> Rule:
    """A cell where ``explode`` makes no difference."""
    return (renderer, renderer)


# ---------------------------------------------------------------------------
# Shared renderers
# ---------------------------------------------------------------------------


def _scalar(name: str, value: Any) -> str:
    return format_scalar(value)


def _named_scalar(name: str, value: Any) -> str:
    return f"{name}={format_scalar(value)}"


def _comma_items(name: str, values: Any) -> str:
    return ",".join(_items(name, values))


def _named_comma_items(name: str, values: Any) -> str:
    return f"{name}=" + ",".join(_items(name, values))


def _repeated_items(name: str, values: Any) -> str:
    return "&".join(f"{name}={item}" for item in _items(name, values))


def _named_flat(name: str, mapping: Any) -> str:
    return f"{name}={_flat(name, mapping)}"


def _deep_object_pairs(name: str, mapping: Any) -> str:
    return "&".join(f"{name}[{key}]={value}" for key, value in _pairs(name, mapping))


_FORM_MAPPING: Rule = (
    _named_flat,
    lambda name, mapping: _joined_pairs(name, mapping, "&"),
)


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

PATH_RULES: Mapping[tuple[str, ValueShape], Rule] = {
    ("simple", _SEQ): _same(_comma_items),
    ("simple", _MAP): (
        _flat,
        lambda name, mapping: _joined_pairs(name, mapping, ","),
    ),
    ("simple", _SCALAR): _same(_scalar),
    ("label", _SEQ): (
        lambda name, values: "." + ",".join(_items(name, values)),
        lambda name, values: "." + ".".join(_items(name, values)),
    ),
    ("label", _MAP): (
        lambda name, mapping: "." + _flat(name, mapping),
        lambda name, mapping: _joined_pairs(name, mapping, "", prefix="."),
    ),
    ("label", _SCALAR): _same(lambda name, value: "." + format_scalar(value)),
    ("matrix", _SEQ): (
        lambda name, values: f";{name}=" + ",".join(_items(name, values)),
        lambda name, values: "".join(f";{name}={item}" for item in _items(name, values)),
    ),
    ("matrix", _MAP): (
        lambda name, mapping: ";" + _flat(name, mapping),
        lambda name, mapping: _joined_pairs(name, mapping, "", prefix=";"),
    ),
    ("matrix", _SCALAR): _same(lambda name, value: f";{_named_scalar(name, value)}"),
}

QUERY_RULES: Mapping[tuple[str, ValueShape], Rule] = {
    ("form", _SEQ): (_named_comma_items, _repeated_items),
    ("form", _MAP): _FORM_MAPPING,
    ("form", _SCALAR): _same(_named_scalar),
    ("spaceDelimited", _SEQ): (
        lambda name, values: f"{name}=" + "%20".join(_items(name, values)),
        _repeated_items,
    ),
    ("spaceDelimited", _MAP): _FORM_MAPPING,
    ("spaceDelimited", _SCALAR): _same(_named_scalar),
    ("pipeDelimited", _SEQ): (
        lambda name, values: f"{name}=" + "|".join(_items(name, values)),
        _repeated_items,
    ),
    ("pipeDelimited", _MAP): _FORM_MAPPING,
    ("pipeDelimited", _SCALAR): _same(_named_scalar),
    ("deepObject", _MAP): (_named_flat, _deep_object_pairs),
}

HEADER_RULES: Mapping[tuple[str, ValueShape], Rule] = {
    ("simple", _SEQ): _same(_comma_items),
    ("simple", _MAP): (
        _flat,
        lambda name, mapping: _joined_pairs(name, mapping, ","),
    ),
    ("simple", _SCALAR): _same(_scalar),
}

# Cookies ignore explode.
COOKIE_RULES: Mapping[tuple[str, ValueShape], Rule] = {
    ("form", _SEQ): _same(_named_comma_items),
    ("form", _MAP): _same(_named_flat),
    ("form", _SCALAR): _same(_named_scalar),
}

RULES: Mapping[ParameterLocation, Mapping[tuple[str, ValueShape], Rule]] = {
    ParameterLocation.PATH: PATH_RULES,
    ParameterLocation.QUERY: QUERY_RULES,
    ParameterLocation.HEADER: HEADER_RULES,
    ParameterLocation.COOKIE: COOKIE_RULES,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def serialize_parameter(param: ParameterSchema, value: Any) -> str:
    """Serialize one value for one declared parameter.

    *param* must carry a concrete style (as stored by a
    :class:`~tryout.request.registry.ParameterRegistry`).

    Raises:
        MalformedValueShape: If the value's shape has no rule for the
            parameter's style, or the value nests composites.

    Example::

        param = ParameterSchema(name="id", location="path", style="matrix", explode=True)
        serialize_parameter(param, [1, 2, 3])  # ';id=1;id=2;id=3'
    """
    shape = classify_value(value)
    rule = RULES[param.location].get((param.style, shape))
    if rule is None:
        raise MalformedValueShape(
            f"Parameter '{param.name}' ({param.location.value}, style "
            f"'{param.style}') cannot serialize a {shape.value} value"
        )
    collapsed, exploded = rule
    renderer = exploded if param.explode else collapsed
    return renderer(param.name, value)


def _serialize(
    registry: ParameterRegistry,
    values: Mapping[str, Any],
    location: ParameterLocation,
) -> dict[str, str]:
    return {
        name: serialize_parameter(registry.lookup(name, location), value)
        for name, value in values.items()
    }


def serialize_path_params(
    registry: ParameterRegistry, values: Mapping[str, Any]
) -> dict[str, str]:
    """Serialize path values into ``{name: fragment}``, preserving input order."""
    return _serialize(registry, values, ParameterLocation.PATH)


def serialize_query_params(
    registry: ParameterRegistry, values: Mapping[str, Any]
) -> list[str]:
    """Serialize query values into one pre-joined ``key=value`` fragment per parameter.

    A fragment may itself contain ``&`` (exploded arrays and objects).
    """
    return list(_serialize(registry, values, ParameterLocation.QUERY).values())


def serialize_header_params(
    registry: ParameterRegistry, values: Mapping[str, Any]
) -> dict[str, str]:
    """Serialize header values into ``{header name: header value}``."""
    return _serialize(registry, values, ParameterLocation.HEADER)


def serialize_cookie_params(
    registry: ParameterRegistry, values: Mapping[str, Any]
) -> dict[str, str]:
    """Serialize cookie values into ``{name: "name=value"}``."""
    return _serialize(registry, values, ParameterLocation.COOKIE)
