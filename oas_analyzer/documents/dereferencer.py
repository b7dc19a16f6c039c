"""Local $ref expansion for API definitions.

The dereferencer builds a NEW tree with every local ``$ref`` replaced by the
content it points at. The input document is never modified.

Cycles are not errors. Before expanding, every local ``$ref`` in the
document is collected into a reference graph: an edge runs from each
referenced target that lexically contains a ``$ref`` to the target that
``$ref`` points at. A ``$ref`` is circular when its edge lies inside a
strongly connected component (including a target referencing itself).
Circular ``$ref`` objects are kept as-is and their locations are recorded
in ``circular_refs``; every other ``$ref`` is replaced by its target's
expansion. Each target is expanded once and the result is shared, so the
cost stays linear in the document size however densely schemas refer to
one another.

External references (anything not starting with ``#``) are left untouched,
since resolving them would need I/O.
"""

import asyncio
import copy
import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from oas_analyzer.documents.pointers import parse_pointer, resolve_pointer, to_pointer
from oas_analyzer.errors import DereferenceError

logger = logging.getLogger(__name__)

Tokens = tuple[str, ...]


class DereferenceResult(BaseModel):
    """Expanded document plus the cycle-closing $ref locations."""

    document: dict[str, Any] = Field(description="Document with local refs expanded")
    circular_refs: list[str] = Field(
        default_factory=list,
        description="Sorted locations of $ref objects left in place because they close a cycle",
    )


def collect_local_refs(document: dict[str, Any]) -> list[tuple[tuple, Tokens]]:
    """``(location, target tokens)`` for every local ``$ref`` in the document.

    ``$ref`` objects are leaves: their sibling keys are not searched, the
    same way expansion replaces them wholesale.
    """
    refs: list[tuple[tuple, Tokens]] = []
    pending: list[tuple[tuple, Any]] = [((), document)]
    while pending:
        location, node = pending.pop()
        if isinstance(node, dict):
            if "$ref" in node:
                ref = node["$ref"]
                if isinstance(ref, str) and ref.startswith("#"):
                    refs.append((location, parse_pointer(ref)))
                continue
            pending.extend((location + (key,), value) for key, value in node.items())
        elif isinstance(node, list):
            pending.extend((location + (index,), value) for index, value in enumerate(node))
    return refs


def strongly_connected_components(graph: dict[Tokens, set[Tokens]]) -> dict[Tokens, int]:
    """Map each node to a component id (iterative Tarjan)."""
    index: dict[Tokens, int] = {}
    lowlink: dict[Tokens, int] = {}
    component: dict[Tokens, int] = {}
    on_stack: set[Tokens] = set()
    stack: list[Tokens] = []
    counter = 0

    for root in graph:
        if root in index:
            continue
        index[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(graph[root]))]

        while work:
            node, children = work[-1]
            descended = False
            for child in children:
                if child not in index:
                    index[child] = lowlink[child] = counter
                    counter += 1
                    stack.append(child)
                    on_stack.add(child)
                    work.append((child, iter(graph.get(child, ()))))
                    descended = True
                    break
                if child in on_stack:
                    lowlink[node] = min(lowlink[node], index[child])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])
            if lowlink[node] == index[node]:
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component[member] = index[node]
                    if member == node:
                        break

    return component


def find_circular_refs(refs: Iterable[tuple[tuple, Tokens]]) -> set[str]:
    """Locations of ``$ref`` objects whose reference edge lies on a cycle."""
    refs = list(refs)
    targets = {target for _, target in refs}
    graph: dict[Tokens, set[Tokens]] = {target: set() for target in targets}
    edges: list[tuple[str, Tokens, Tokens]] = []

    for location, target in refs:
        tokens = tuple(str(token) for token in location)
        for depth in range(len(tokens) + 1):
            owner = tokens[:depth]
            if owner in targets:
                graph[owner].add(target)
                edges.append((to_pointer(location), owner, target))

    component = strongly_connected_components(graph)
    return {
        pointer for pointer, owner, target in edges
        if component[owner] == component[target]
    }


class _Expansion:
    """State for one dereference pass over a single document."""

    def __init__(self, document: dict[str, Any]):
        self.document = document
        self.cyclic = find_circular_refs(collect_local_refs(document))
        self.circular: set[str] = set()
        self._expanded: dict[Tokens, Any] = {}

    def expand(self, node: Any, location: tuple, stack: tuple[Tokens, ...]) -> Any:
        if isinstance(node, dict):
            if "$ref" in node:
                return self._expand_ref(node, location, stack)
            return {
                key: self.expand(value, location + (key,), stack)
                for key, value in node.items()
            }
        if isinstance(node, list):
            return [
                self.expand(value, location + (index,), stack)
                for index, value in enumerate(node)
            ]
        return node

    def _expand_ref(self, node: dict, location: tuple, stack: tuple[Tokens, ...]) -> Any:
        ref = node["$ref"]
        if not isinstance(ref, str):
            raise DereferenceError(None, f"$ref at {to_pointer(location)} is not a string")

        if not ref.startswith("#"):
            return copy.deepcopy(node)

        pointer = to_pointer(location)
        tokens = parse_pointer(ref)
        # The stack check covers refs nested beside another $ref, which the graph skips
        if pointer in self.cyclic or tokens in stack:
            self.circular.add(pointer)
            return dict(node)

        if tokens not in self._expanded:
            target = resolve_pointer(self.document, tokens, ref)
            self._expanded[tokens] = self.expand(target, tokens, stack + (tokens,))
        return self._expanded[tokens]


class Dereferencer:
    """Expands local references; reports cycles instead of failing on them."""

    def dereference_sync(self, document: dict[str, Any]) -> DereferenceResult:
        """Expand all local refs in ``document``.

        Raises:
            DereferenceError: On a non-string $ref, a pointer that does not
                resolve inside the document, or nesting too deep to expand.
        """
        try:
            expansion = _Expansion(document)
            expanded = expansion.expand(document, (), ())
        except RecursionError as e:
            raise DereferenceError(None, "document is nested too deeply to expand") from e
        if not isinstance(expanded, dict):
            raise DereferenceError(None, "root reference did not resolve to an object")

        circular_refs = sorted(expansion.circular)
        if circular_refs:
            logger.debug(f"Dereference found {len(circular_refs)} circular refs")
        return DereferenceResult(document=expanded, circular_refs=circular_refs)

    async def dereference(self, document: dict[str, Any]) -> DereferenceResult:
        """Async variant; the expansion runs off the event loop."""
        return await asyncio.to_thread(self.dereference_sync, document)


# Global dereferencer instance
_dereferencer: Optional[Dereferencer] = None


def get_dereferencer() -> Dereferencer:
    """Get the global dereferencer instance."""
    global _dereferencer
    if _dereferencer is None:
        _dereferencer = Dereferencer()
    return _dereferencer
