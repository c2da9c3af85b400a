"""Follow ``$ref`` JSON Reference pointers in OpenAPI documents.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  Unlike a
whole-document inliner, this module dereferences one node at a time and
never copies or mutates the document: :func:`resolve` follows a chain of
pointers until it reaches a node that is not itself a reference and
returns that node as found in the root document.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~tryout.exceptions.SpecParseError`.

A chain that revisits a pointer (``A -> B -> A``, or a schema that points at
itself) raises :class:`~tryout.exceptions.CyclicReferenceError` instead of
looping forever.
"""

from __future__ import annotations

from typing import Any

from tryout.exceptions import CyclicReferenceError, SpecParseError


def is_ref(node: Any) -> bool:
    """Return ``True`` when *node* is a ``{"$ref": ...}`` reference object."""
    return isinstance(node, dict) and isinstance(node.get("$ref"), str)


def resolve(node: Any, root: dict[str, Any]) -> Any:
    """Dereference *node* against *root* until a non-reference node is reached.

    Args:
        node: Any node of the document; typically a schema dict.  Nodes that
            are not references are returned unchanged.
        root: The root document the ``#/...`` pointers are relative to.

    Returns:
        The first node in the chain that is not a ``$ref`` object.  It is
        the document's own object, not a copy.

    Raises:
        CyclicReferenceError: If the chain visits the same pointer twice.
        SpecParseError: If a pointer is external or does not exist.

    Example::

        root = {"components": {"schemas": {"Id": {"type": "integer"}}}}
        resolve({"$ref": "#/components/schemas/Id"}, root)
        # -> {"type": "integer"}
    """
    visited: list[str] = []
    current = node
    while is_ref(current):
        pointer = current["$ref"]
        if pointer in visited:
            raise CyclicReferenceError(pointer, tuple(visited))
        visited.append(pointer)
        current = resolve_pointer(pointer, root)
    return current


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Look up a single ``#/a/b/c`` pointer in *root*.

    Handles RFC 6901 JSON Pointer escaping (``~0`` for ``~``, ``~1`` for
    ``/``).  List segments are interpreted as integer indices.

    Raises:
        SpecParseError: If the reference is external (does not start with
            ``#/``), or if any segment in the pointer path does not exist
            in the document.
    """
    if ref == "#":
        return root
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current
