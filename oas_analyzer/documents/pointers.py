"""JSON pointer helpers for API definitions.

Locations reported by queries are JSON pointers prefixed with ``#`` so they
can be used directly as local ``$ref`` values, e.g.
``#/paths/~1pets/get/responses/200``.
"""

from typing import Any, Iterator, Sequence, Union
from urllib.parse import unquote

from oas_analyzer.errors import DereferenceError

PathToken = Union[str, int]


def escape_token(token: PathToken) -> str:
    """Escape a single reference token (RFC 6901)."""
    return str(token).replace("~", "~0").replace("/", "~1")


def unescape_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def to_pointer(path: Sequence[PathToken]) -> str:
    """Render a token path as a ``#``-prefixed JSON pointer."""
    return "#" + "".join(f"/{escape_token(token)}" for token in path)


def parse_pointer(ref: str) -> tuple[str, ...]:
    """Split a local ``$ref`` (``#/a/b``) into unescaped tokens.

    Raises:
        DereferenceError: If the ref is not a local JSON pointer.
    """
    if not ref.startswith("#"):
        raise DereferenceError(ref, "not a local reference")
    fragment = unquote(ref[1:])
    if fragment == "":
        return ()
    if not fragment.startswith("/"):
        raise DereferenceError(ref, "fragment is not a JSON pointer")
    return tuple(unescape_token(token) for token in fragment.split("/")[1:])


def resolve_pointer(document: Any, tokens: Sequence[str], ref: str = "") -> Any:
    """Follow pointer tokens through the document tree."""
    node = document
    for token in tokens:
        if isinstance(node, dict):
            if token not in node:
                raise DereferenceError(ref or to_pointer(tokens), f"missing key '{token}'")
            node = node[token]
        elif isinstance(node, list):
            try:
                index = int(token)
            except ValueError:
                raise DereferenceError(ref or to_pointer(tokens), f"'{token}' is not an array index")
            if index < 0 or index >= len(node):
                raise DereferenceError(ref or to_pointer(tokens), f"index {index} out of range")
            node = node[index]
        else:
            raise DereferenceError(ref or to_pointer(tokens), f"cannot descend into scalar at '{token}'")
    return node


def walk(node: Any, path: tuple = ()) -> Iterator[tuple[tuple, Any]]:
    """Yield ``(path, value)`` for every node, depth-first in document order.

    Dict children are addressed by key, list children by integer index. The
    root itself is yielded first with an empty path.
    """
    yield path, node
    if isinstance(node, dict):
        for key, value in node.items():
            yield from walk(value, path + (key,))
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield from walk(value, path + (index,))
