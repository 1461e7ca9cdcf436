"""Unit tests for graph/analyzer.py."""

from asset_refgraph.graph.analyzer import GraphAnalyzer, suffix_excluder, tarjan_scc
from asset_refgraph.graph.builder import DependencyGraphBuilder


def _analyzer(deps: dict, requested=None) -> GraphAnalyzer:
    """Build forward/reverse maps directly from {id: [deps]}."""
    forward = {k: set(v) for k, v in deps.items()}
    reverse: dict[str, set[str]] = {}
    for src, targets in forward.items():
        for dst in targets:
            reverse.setdefault(dst, set()).add(src)
    return GraphAnalyzer(forward, reverse, requested)


# ── End-to-end examples ───────────────────────────────────────────


class TestEndToEnd:
    """Worked examples run through builder and analyzer."""

    def test_mutual_cycle_example(self, cycle_source):
        """Mutual B/C reference gives B as hub, A orphaned, one cycle."""
        result = DependencyGraphBuilder(cycle_source).build(["A", "B", "C"])
        analyzer = GraphAnalyzer.from_build(result)

        assert analyzer.most_referenced(10) == [("B", 2)]
        assert analyzer.orphaned() == ["A"]
        assert analyzer.cycles() == [("B", "C")]

    def test_analyze_all_example(self, source_factory):
        """An empty request scans every asset the source knows."""
        source = source_factory({"X": ["Y"], "Y": []})
        result = DependencyGraphBuilder(source).build([])
        analyzer = GraphAnalyzer.from_build(result)

        assert result.forward == {"X": {"Y"}, "Y": set()}
        assert analyzer.orphaned() == ["X"]


# ── most_referenced ───────────────────────────────────────────────


class TestMostReferenced:
    """Test most_referenced ranking."""

    def test_requires_more_than_one_referrer(self):
        """Assets with a single referrer are left out."""
        analyzer = _analyzer({"a": ["x"], "b": ["y"], "c": ["y"]})
        assert analyzer.most_referenced(10) == [("y", 2)]

    def test_order_and_ties(self):
        """Higher counts first, ties broken by identity."""
        analyzer = _analyzer(
            {
                "a": ["hub", "m", "z"],
                "b": ["hub", "m", "z"],
                "c": ["hub"],
                "d": ["hub", "k"],
                "e": ["k"],
            }
        )
        assert analyzer.most_referenced(10) == [("hub", 4), ("k", 2), ("m", 2), ("z", 2)]

    def test_limit(self):
        """Only the first n entries are returned."""
        analyzer = _analyzer({"a": ["x", "y", "z"], "b": ["x", "y", "z"]})
        assert analyzer.most_referenced(2) == [("x", 2), ("y", 2)]
        assert analyzer.most_referenced(0) == []

    def test_deterministic(self):
        """Repeated calls give identical results."""
        analyzer = _analyzer({"a": ["x", "y"], "b": ["y", "x"], "c": ["x"]})
        assert analyzer.most_referenced(5) == analyzer.most_referenced(5)


# ── orphaned ──────────────────────────────────────────────────────


class TestOrphaned:
    """Test orphan detection."""

    def test_follows_request_order(self):
        """Orphans are listed in the order they were requested."""
        analyzer = _analyzer({"c": [], "a": ["b"], "b": []}, requested=["c", "a", "b"])
        assert analyzer.orphaned() == ["c", "a"]

    def test_never_includes_referenced_assets(self):
        """An asset with any referrer is never an orphan."""
        analyzer = _analyzer({"a": ["b"], "b": ["a"], "c": ["a"]})
        orphans = analyzer.orphaned()
        assert orphans == ["c"]
        for asset_id in orphans:
            assert not analyzer.reverse.get(asset_id)

    def test_exclusion_predicate(self):
        """Suffix exclusion ignores case."""
        paths = {"s": "Assets/Scripts/Player.cs", "h": "Assets/FX/Glow.SHADER", "p": "Assets/p.prefab"}
        analyzer = _analyzer({"s": [], "h": [], "p": []})
        exclude = suffix_excluder([".cs", ".shader"], paths.get)
        assert analyzer.orphaned(exclude=exclude) == ["p"]

    def test_limit(self):
        """The limit truncates the orphan list."""
        analyzer = _analyzer({name: [] for name in "abcdef"})
        assert analyzer.orphaned(limit=3) == ["a", "b", "c"]
        assert analyzer.orphaned(limit=0) == []

    def test_empty_suffix_list_excludes_nothing(self):
        """No suffixes means nothing is excluded."""
        exclude = suffix_excluder([], lambda asset_id: asset_id)
        assert not exclude("x.cs")

    def test_unresolvable_path_is_not_excluded(self):
        """An identity whose path lookup fails is kept as an orphan."""
        paths = {"s": "Assets/Player.cs"}
        exclude = suffix_excluder([".cs"], paths.__getitem__)
        assert exclude("s")
        assert not exclude("ghost")


# ── cycles ────────────────────────────────────────────────────────


class TestCycles:
    """Test mutual-reference and cycle-group detection."""

    def test_each_pair_once(self):
        """A mutual pair is reported once as (low, high)."""
        analyzer = _analyzer({"a": ["b"], "b": ["a", "c"], "c": ["b"]})
        assert analyzer.cycles() == [("a", "b"), ("b", "c")]

    def test_longer_cycle_is_not_a_pair(self):
        """A three-asset loop is a group, not a pair."""
        analyzer = _analyzer({"a": ["b"], "b": ["c"], "c": ["a"]})
        assert analyzer.cycles() == []
        assert analyzer.cycle_groups() == [("a", "b", "c")]

    def test_no_cycles_in_chain(self, chain_source):
        """A straight chain has no cycles."""
        result = DependencyGraphBuilder(chain_source).build([])
        analyzer = GraphAnalyzer.from_build(result)
        assert analyzer.cycles() == []
        assert analyzer.cycle_groups() == []

    def test_cycle_groups_sorted(self):
        """Groups are sorted tuples in sorted order."""
        analyzer = _analyzer(
            {"q": ["p"], "p": ["q"], "c": ["a"], "a": ["b"], "b": ["c"], "x": ["a"]}
        )
        assert analyzer.cycle_groups() == [("a", "b", "c"), ("p", "q")]


class TestTarjanSCC:
    """Test the iterative Tarjan implementation."""

    def test_deep_chain_does_not_recurse(self):
        """A 5000-node ring is one component without hitting recursion limits."""
        n = 5000
        adjacency = {f"n{i}": {f"n{(i + 1) % n}"} for i in range(n)}
        components = tarjan_scc(adjacency, set(adjacency))
        assert len(components) == 1
        assert len(components[0]) == n

    def test_singletons(self):
        """Acyclic nodes form singleton components."""
        adjacency = {"a": {"b"}, "b": set()}
        components = tarjan_scc(adjacency, {"a", "b"})
        assert sorted(len(c) for c in components) == [1, 1]


# ── references ────────────────────────────────────────────────────


class TestReferences:
    """Test reference lookups."""

    def test_find_references(self):
        """Unknown and unreferenced identities map to None."""
        analyzer = _analyzer({"a": ["t"], "b": ["t"], "t": []})
        refs = analyzer.find_references(["t", "a", "ghost"])
        assert refs == {"t": ["a", "b"], "a": None, "ghost": None}

    def test_transitive_referrers(self, chain_source):
        """Every upstream asset of a chain tail is found."""
        result = DependencyGraphBuilder(chain_source).build([])
        analyzer = GraphAnalyzer.from_build(result)
        assert analyzer.transitive_referrers("e") == {"a", "b", "c", "d"}
        assert analyzer.transitive_referrers("a") == set()

    def test_transitive_referrers_through_cycle(self):
        """Cycles terminate and exclude the asset itself."""
        analyzer = _analyzer({"a": ["b"], "b": ["a"], "c": ["a"]})
        assert analyzer.transitive_referrers("a") == {"b", "c"}
