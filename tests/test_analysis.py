"""Tests for cluster summaries and the text report."""

import pytest
import numpy as np

from lloydkit.clustering import KMeansEngine, FixedAssignment
from lloydkit.clustering.analysis import analyze_clusters, print_cluster_report, ClusterSummary


@pytest.fixture
def row_result(four_points):
    engine = KMeansEngine(init=FixedAssignment([0, 0, 1, 1]))
    return engine.cluster(four_points, 2)


class TestAnalyzeClusters:
    """Tests for analyze_clusters."""

    def test_one_summary_per_cluster(self, row_result, four_points):
        summaries = analyze_clusters(row_result, four_points)

        assert [s.cluster_id for s in summaries] == [0, 1]
        assert all(isinstance(s, ClusterSummary) for s in summaries)
        assert [s.size for s in summaries] == [2, 2]
        assert sum(s.percentage for s in summaries) == pytest.approx(100.0)

    def test_members_and_centroids(self, row_result, four_points):
        summaries = analyze_clusters(row_result, four_points)

        assert summaries[0].member_indices == [0, 1]
        assert summaries[1].member_indices == [2, 3]
        np.testing.assert_allclose(summaries[1].centroid, [10.0, 0.5])
        assert summaries[0].mean_distance == pytest.approx(0.5)

    def test_representatives_limited_and_named(self, row_result, four_points):
        names = ['a', 'b', 'c', 'd']
        summaries = analyze_clusters(row_result, four_points, names=names, n_representatives=1)

        assert summaries[0].representative_indices == [0]
        assert summaries[0].description == "Cluster 0: like a"

    def test_word_clusters(self):
        words = ['cat', 'bat', 'cart', 'house', 'mouse', 'horse']
        engine = KMeansEngine(
            init=FixedAssignment([0, 0, 0, 1, 1, 1]),
            distance='edit',
            centroid='medoid',
        )
        result = engine.cluster(words, 2)

        summaries = analyze_clusters(result, words, names=words, distance='edit')

        assert summaries[0].centroid == 'cat'
        assert summaries[0].representative_indices[0] == 0


class TestPrintReport:
    """Tests for print_cluster_report."""

    def test_report_lists_every_cluster(self, row_result, four_points, capsys):
        summaries = analyze_clusters(row_result, four_points)
        print_cluster_report(summaries, row_result)

        out = capsys.readouterr().out
        assert "CLUSTER ANALYSIS REPORT" in out
        assert "Cluster 0" in out
        assert "Cluster 1" in out
        assert "converged" in out
        assert "(10.000, 0.500)" in out
