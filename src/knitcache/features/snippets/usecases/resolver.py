"""
Summary: Order snippets so each runs after its declared dependencies.
Why: Snippets share one session, so dependencies must run first while unrelated snippets keep document order.
"""

from __future__ import annotations

import heapq
from collections.abc import Sequence
from typing import final

from knitcache.platform.logging import logger
from knitcache.shared.errors import CycleError, DuplicateSnippetError, SnippetNotFoundError
from knitcache.shared.snippet import Snippet


@final
class DependencyResolver:
    """Stable topological sort over declared ``dependson`` edges."""

    def order(self, snippets: Sequence[Snippet]) -> list[Snippet]:
        """Return ``snippets`` in an execution order honouring dependencies.

        Among snippets without an ordering constraint between them the input
        order is kept, so a sequence without edges comes back unchanged.

        Raises:
            SnippetNotFoundError: A dependency names an unknown snippet.
            CycleError: Dependencies form a cycle; no partial order is returned.
        """
        index_of: dict[str, int] = {}
        for index, snippet in enumerate(snippets):
            if snippet.id in index_of:
                raise DuplicateSnippetError(snippet.id)
            index_of[snippet.id] = index

        dependents: list[list[int]] = [[] for _ in snippets]
        pending: list[int] = [0] * len(snippets)
        for index, snippet in enumerate(snippets):
            for dependency in snippet.dependencies:
                if dependency not in index_of:
                    raise SnippetNotFoundError(dependency, referenced_by=snippet.id)
                dependents[index_of[dependency]].append(index)
                pending[index] += 1

        ready = [index for index, count in enumerate(pending) if count == 0]
        heapq.heapify(ready)
        ordered: list[Snippet] = []
        while ready:
            index = heapq.heappop(ready)
            ordered.append(snippets[index])
            for dependent in dependents[index]:
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, dependent)

        if len(ordered) < len(snippets):
            members = self._cycle_members(snippets, index_of)
            logger.error("Dependency cycle detected: %s", ", ".join(members))
            raise CycleError(members)

        return ordered

    @staticmethod
    def _cycle_members(snippets: Sequence[Snippet], index_of: dict[str, int]) -> list[str]:
        """Collect snippets that sit on a cycle, in document order.

        Uses an iterative Tarjan walk; a member is any snippet in a strongly
        connected component of size > 1, or one that depends on itself.
        """
        edges = [[index_of[d] for d in snippet.dependencies] for snippet in snippets]
        counter = 0
        low: list[int] = [0] * len(snippets)
        number: list[int | None] = [None] * len(snippets)
        on_stack: list[bool] = [False] * len(snippets)
        stack: list[int] = []
        members: set[int] = set()

        for root in range(len(snippets)):
            if number[root] is not None:
                continue
            work: list[tuple[int, int]] = [(root, 0)]
            while work:
                node, edge_index = work.pop()
                if edge_index == 0:
                    number[node] = low[node] = counter
                    counter += 1
                    stack.append(node)
                    on_stack[node] = True
                if edge_index < len(edges[node]):
                    work.append((node, edge_index + 1))
                    target = edges[node][edge_index]
                    target_number = number[target]
                    if target_number is None:
                        work.append((target, 0))
                    elif on_stack[target]:
                        low[node] = min(low[node], target_number)
                    continue

                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[node])
                if low[node] == number[node]:
                    component: list[int] = []
                    while True:
                        member = stack.pop()
                        on_stack[member] = False
                        component.append(member)
                        if member == node:
                            break
                    if len(component) > 1 or node in edges[node]:
                        members.update(component)

        return [snippets[index].id for index in sorted(members)]


__all__ = ["DependencyResolver"]
