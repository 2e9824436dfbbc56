from driftwatch.cluster import cluster_by_drift_pattern, format_cluster
from driftwatch.models import CompareResult, Diff


def make_cluster_results():
    return [
        CompareResult("alpha", [Diff("timeout", "30s", "60s"), Diff("replicas", "2", "3")]),
        CompareResult("beta", [Diff("timeout", "30s", "90s"), Diff("replicas", "2", "4")]),
        CompareResult("gamma", [Diff("log_level", "info", "debug")]),
        CompareResult("clean", []),
    ]


def test_cluster_finds_cluster():
    cr = cluster_by_drift_pattern(make_cluster_results(), 2)
    assert len(cr.clusters) == 1
    group = cr.clusters[0]
    assert len(group.services) == 2
    assert group.shared_keys == ["replicas", "timeout"]


def test_cluster_unclustered():
    cr = cluster_by_drift_pattern(make_cluster_results(), 2)
    assert "gamma" in cr.unclustered


def test_cluster_skips_clean_services():
    cr = cluster_by_drift_pattern(make_cluster_results(), 1)
    for g in cr.clusters:
        assert "clean" not in g.services
    assert "clean" not in cr.unclustered


def test_cluster_no_clusters():
    results = [
        CompareResult("svc-a", [Diff("x", "1", "2")]),
        CompareResult("svc-b", [Diff("y", "1", "2")]),
    ]
    cr = cluster_by_drift_pattern(results, 1)
    assert cr.clusters == []
    assert cr.unclustered == ["svc-a", "svc-b"]


def test_format_cluster_contains_label():
    out = format_cluster(cluster_by_drift_pattern(make_cluster_results(), 2))
    assert "cluster-1" in out
    assert "Clusters found:" in out
    assert "Unclustered: gamma" in out


def test_cluster_every_drifted_service_placed_once():
    cr = cluster_by_drift_pattern(make_cluster_results(), 1)
    placed = [s for g in cr.clusters for s in g.services] + cr.unclustered
    assert sorted(placed) == ["alpha", "beta", "gamma"]