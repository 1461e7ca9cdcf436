"""Read-only queries over a built reference graph: rankings, orphans, cycles."""

from __future__ import annotations

from collections import deque
from typing import Callable, Iterable, Optional, Sequence

from ..models import BuildResult, ForwardMap, ReverseMap

# Returns True for assets that must never be reported as orphans.
ExcludePredicate = Callable[[str], bool]


class GraphAnalyzer:
    """Queries over a completed (forward, reverse) map pair.

    The maps are never modified, so one analyzer may serve several
    threads at once.
    """

    def __init__(
        self,
        forward: ForwardMap,
        reverse: ReverseMap,
        analyzed: Optional[Sequence[str]] = None,
    ):
        self.forward = forward
        self.reverse = reverse
        # Analyzed set in request order; defaults to the forward keys
        self.analyzed: list[str] = list(analyzed) if analyzed is not None else list(forward)

    @classmethod
    def from_build(cls, result: BuildResult) -> GraphAnalyzer:
        return cls(result.forward, result.reverse, result.requested)

    def most_referenced(self, n: int) -> list[tuple[str, int]]:
        """Assets referenced by more than one other asset.

        Sorted by reference count descending, then identity ascending.
        """
        if n <= 0:
            return []
        ranked = [(asset_id, len(refs)) for asset_id, refs in self.reverse.items() if len(refs) > 1]
        ranked.sort(key=lambda item: (-item[1], item[0]))
        return ranked[:n]

    def orphaned(
        self,
        exclude: Optional[ExcludePredicate] = None,
        limit: Optional[int] = None,
    ) -> list[str]:
        """Analyzed assets that nothing references, in request order."""
        result: list[str] = []
        if limit is not None and limit <= 0:
            return result
        for asset_id in self.analyzed:
            if self.reverse.get(asset_id):
                continue
            if exclude is not None and exclude(asset_id):
                continue
            result.append(asset_id)
            if limit is not None and len(result) >= limit:
                break
        return result

    def cycles(self) -> list[tuple[str, str]]:
        """Direct mutual references (a -> b -> a), each pair once as (low, high).

        Only length-2 cycles are reported here; see cycle_groups() for
        longer chains.
        """
        pairs: set[tuple[str, str]] = set()
        for a, deps in self.forward.items():
            for b in deps:
                if a != b and a in self.forward.get(b, ()):
                    pairs.add((a, b) if a < b else (b, a))
        return sorted(pairs)

    def cycle_groups(self) -> list[tuple[str, ...]]:
        """Strongly connected components with more than one asset.

        Each group is sorted; groups are ordered by their first member.
        """
        nodes = set(self.forward)
        for deps in self.forward.values():
            nodes.update(deps)
        groups = [tuple(sorted(c)) for c in tarjan_scc(self.forward, nodes) if len(c) > 1]
        groups.sort()
        return groups

    def find_references(self, selection: Iterable[str]) -> dict[str, Optional[list[str]]]:
        """Referrers of each selected asset, excluding itself.

        None marks an asset the reverse map knows nothing about.
        """
        refs: dict[str, Optional[list[str]]] = {}
        for asset_id in selection:
            referrers = self.reverse.get(asset_id)
            if referrers is None:
                refs[asset_id] = None
            else:
                refs[asset_id] = sorted(r for r in referrers if r != asset_id)
        return refs

    def transitive_referrers(self, asset_id: str) -> set[str]:
        """Every asset that reaches asset_id through references.

        Uses BFS on the reverse map: if A references B and B references C,
        both A and B are affected by a change to C.
        """
        visited: set[str] = set()
        queue: deque[str] = deque(self.reverse.get(asset_id, ()))
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            queue.extend(n for n in self.reverse.get(node, ()) if n not in visited)
        visited.discard(asset_id)
        return visited


def suffix_excluder(
    suffixes: Iterable[str],
    display_path: Callable[[str], str],
) -> ExcludePredicate:
    """Build an orphan exclusion predicate from display-path suffixes.

    Matching is case-insensitive, e.g. (".cs", ".shader") skips scripts
    and shaders. An identity whose path cannot be resolved is never
    excluded.
    """
    lowered = tuple(s.lower() for s in suffixes)

    def exclude(asset_id: str) -> bool:
        if not lowered:
            return False
        try:
            path = display_path(asset_id)
        except LookupError:
            return False
        return path.lower().endswith(lowered)

    return exclude


def tarjan_scc(adjacency: ForwardMap, all_nodes: set[str]) -> list[set[str]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    reference chains.
    """
    counter = 0
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    result: list[set[str]] = []

    for root in sorted(all_nodes):
        if root in index:
            continue

        # Explicit call stack: each frame is (node, neighbor_iterator)
        call_stack: list[tuple] = []
        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        neighbors = sorted(w for w in adjacency.get(root, ()) if w in all_nodes)
        call_stack.append((root, iter(neighbors)))

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    w_neighbors = sorted(n for n in adjacency.get(w, ()) if n in all_nodes)
                    call_stack.append((w, iter(w_neighbors)))
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: set[str] = set()
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.add(w)
                        if w == v:
                            break
                    result.append(component)

    return result
