"""Tests for the run_clustering command line script."""

import importlib.util
import json
from pathlib import Path

import pandas as pd
import pytest

SCRIPT = Path(__file__).parent.parent / 'scripts' / 'run_clustering.py'


@pytest.fixture
def run_clustering():
    spec = importlib.util.spec_from_file_location('run_clustering', SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestRunClustering:
    """End-to-end runs of the script."""

    def test_csv_run_writes_outputs(self, run_clustering, tmp_path):
        """Test that assignments and cluster info are saved."""
        data = tmp_path / 'points.csv'
        data.write_text("name,x,y\np0,0,0\np1,0,1\np2,10,0\np3,10,1\n")
        out = tmp_path / 'out'

        code = run_clustering.main([
            '--input', str(data),
            '--k', '2',
            '--init', 'k-means++',
            '--n-init', '10',
            '--seed', '0',
            '--output', str(out),
            '--report',
        ])

        assert code == 0
        assignments = pd.read_csv(out / 'assignments.csv')
        assert assignments['name'].tolist() == ['p0', 'p1', 'p2', 'p3']
        labels = assignments['cluster'].tolist()
        assert labels[0] == labels[1] != labels[2] == labels[3]

        info = json.loads((out / 'cluster_info.json').read_text())
        assert info['converged'] is True
        assert len(info['clusters']) == 2

    def test_word_list_uses_edit_distance(self, run_clustering, tmp_path):
        """Test that .txt inputs switch to edit distance and medoids."""
        data = tmp_path / 'words.txt'
        data.write_text("cat\nbat\ncart\nhouse\nmouse\nhorse\n")
        out = tmp_path / 'out'

        code = run_clustering.main([
            '--input', str(data), '--k', '2', '--init', 'k-means++',
            '--n-init', '5', '--output', str(out),
        ])

        assert code == 0
        info = json.loads((out / 'cluster_info.json').read_text())
        assert {c['centroid'] for c in info['clusters']} == {'cat', 'house'}

    def test_invalid_k_reports_error(self, run_clustering, tmp_path, capsys):
        """Test that input errors end the run with a non-zero code."""
        data = tmp_path / 'points.csv'
        data.write_text("x,y\n0,0\n1,1\n")

        code = run_clustering.main(['--input', str(data), '--k', '5', '--output', str(tmp_path)])

        assert code == 1
        assert "exceeds" in capsys.readouterr().out
