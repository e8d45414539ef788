"""Integration tests for analyze_graph and the run_analysis.py command line.

Uses tiny graphs and a reduced block model search for fast execution.
"""

import json
import random
import subprocess
import sys
from dataclasses import replace
from pathlib import Path

import numpy as np
import pytest

from run_analysis import run_pipeline
from socialgraph.analysis import analyze_graph, random_transitivity_baseline
from socialgraph.config import AnalysisConfig, BaselineConfig, SBMConfig, config_to_json
from socialgraph.graph import (
    build_graph,
    clique_pair_graph,
    empty_graph,
    star_graph,
)
from socialgraph.reproducibility import set_seed
from socialgraph.results import UndefinedMetricWarning, load_result
from socialgraph.transitivity import average_clustering

ROOT = Path(__file__).resolve().parents[1]

TINY_CONFIG = AnalysisConfig(
    sbm=SBMConfig(k_max=3, restarts=2, max_iterations=50),
    baseline=BaselineConfig(n_samples=5),
    description="pipeline test",
    tags=("test", "e2e"),
)


def _write_edges(tmp_path: Path) -> Path:
    """Two triangles joined by a bridge, plus one isolated member."""
    path = tmp_path / "edges.txt"
    path.write_text(
        "# two friend groups\n"
        "ann bob\nbob cat\ncat ann\n"
        "cat dan\n"
        "dan eve\neve fay\nfay dan\n"
        "gus\n"
    )
    return path


def _bridged_triangles():
    return build_graph(6, [(0, 1), (1, 2), (2, 0), (2, 3), (3, 4), (4, 5), (5, 3)])


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(config_to_json(TINY_CONFIG))
    return path


class TestAnalyzeGraph:
    def test_star(self) -> None:
        result = analyze_graph(star_graph(9), TINY_CONFIG)
        assert result.degree[0] == 9.0
        assert result.betweenness[0] == pytest.approx(36.0)
        assert np.all(result.betweenness.values[1:] == 0.0)
        assert result.closeness[0] == pytest.approx(1.0)
        assert result.global_transitivity == 0.0
        assert result.local_clustering[0] == 0.0
        # Leaves have degree 1: undefined, reported as 0
        assert np.all(result.local_clustering.values[1:] == 0.0)
        notices = [n for n in result.notices() if isinstance(n, UndefinedMetricWarning)]
        assert notices[0].metric == "local_clustering"
        assert notices[0].nodes == tuple(range(1, 10))

    def test_clustered_graph_beats_random_baseline(self) -> None:
        result = analyze_graph(clique_pair_graph(6), TINY_CONFIG)
        assert result.global_transitivity > result.baseline.random_mean
        assert result.baseline.ratio > 1.0
        assert result.sbm.best_k == 2

    def test_average_clustering_from_engine(self) -> None:
        graph = _bridged_triangles()
        result = analyze_graph(graph, TINY_CONFIG)
        assert result.average_clustering == average_clustering(graph)
        # Bridge endpoints close 1 of 3 pairs, the other four nodes all pairs
        assert result.average_clustering == pytest.approx((4 + 2 / 3) / 6)
        metrics = result.metrics_dict()
        assert metrics["average_clustering"] == result.average_clustering

    def test_empty_graph(self) -> None:
        result = analyze_graph(empty_graph(5), TINY_CONFIG)
        assert result.degree.values.tolist() == [0.0] * 5
        assert result.betweenness.values.tolist() == [0.0] * 5
        assert result.closeness.values.tolist() == [0.0] * 5
        assert result.global_transitivity == 0.0
        assert result.sbm.best_k == 1

    def test_single_node_skips_block_model(self) -> None:
        result = analyze_graph(empty_graph(1), TINY_CONFIG)
        assert result.sbm is None
        assert result.sbm_dict() is None

    def test_metrics_dict(self) -> None:
        config = AnalysisConfig(
            sbm=TINY_CONFIG.sbm, baseline=TINY_CONFIG.baseline,
        )
        metrics = analyze_graph(star_graph(4), config).metrics_dict()
        assert metrics["degree"]["values"] == [4.0, 1.0, 1.0, 1.0, 1.0]
        assert metrics["degree"]["top"][:2] == [[0, 4.0], [1, 1.0]]
        assert metrics["closeness"]["summary"]["n_undefined"] == 0
        assert metrics["transitivity_baseline"]["n_samples"] == 5


class TestBaseline:
    def test_no_samples_uses_density(self) -> None:
        graph = build_graph(4, [(0, 1), (1, 2), (0, 2)])
        baseline = random_transitivity_baseline(graph, BaselineConfig(n_samples=0))
        assert baseline.observed == 1.0
        assert baseline.random_mean == pytest.approx(graph.density())
        assert baseline.random_std == 0.0
        assert baseline.ratio == pytest.approx(1.0 / graph.density())

    def test_empty_graph_ratio_undefined(self) -> None:
        baseline = random_transitivity_baseline(empty_graph(4), BaselineConfig())
        assert baseline.random_mean == 0.0
        assert baseline.ratio is None

    def test_reproducible(self) -> None:
        graph = clique_pair_graph(5)
        a = random_transitivity_baseline(graph, BaselineConfig(n_samples=4, seed=3))
        b = random_transitivity_baseline(graph, BaselineConfig(n_samples=4, seed=3))
        assert a == b


class TestRunPipeline:
    def test_writes_valid_result(self, tmp_path: Path) -> None:
        result_path = run_pipeline(
            _write_edges(tmp_path), TINY_CONFIG, results_dir=tmp_path / "results"
        )
        assert result_path.exists()
        data = load_result(result_path)
        assert data["graph"]["n"] == 7
        assert data["graph"]["m"] == 7
        assert data["graph"]["labels"][-1] == "gus"
        assert data["tags"] == ["test", "e2e"]
        # Bridge endpoints carry all cross-group shortest paths
        betweenness = data["metrics"]["betweenness"]["values"]
        assert betweenness[2] == betweenness[3] == max(betweenness)
        assert data["metrics"]["global_transitivity"] == pytest.approx(6 / 10)
        assert any(n["metric"] == "closeness" for n in data["notices"]
                   if n["type"] == "UndefinedMetricWarning")

    def test_seeds_global_rngs(self, tmp_path: Path) -> None:
        config = replace(TINY_CONFIG, sbm=replace(TINY_CONFIG.sbm, random_seed=11))
        run_pipeline(_write_edges(tmp_path), config, results_dir=tmp_path / "results")
        observed = (random.random(), np.random.rand(3).tolist())
        set_seed(11)
        assert observed == (random.random(), np.random.rand(3).tolist())

    def test_unseeded_run_records_seed(self, tmp_path: Path) -> None:
        config = replace(TINY_CONFIG, sbm=replace(TINY_CONFIG.sbm, random_seed=None))
        result_path = run_pipeline(
            _write_edges(tmp_path), config, results_dir=tmp_path / "results"
        )
        seed = load_result(result_path)["config"]["sbm"]["random_seed"]
        assert isinstance(seed, int)
        assert 0 <= seed < 2**32


class TestCommandLine:
    def _run(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            [sys.executable, "run_analysis.py", *args],
            capture_output=True,
            text=True,
            timeout=120,
            cwd=ROOT,
        )

    def test_dry_run_exits_cleanly(self, tmp_path: Path) -> None:
        result = self._run(
            "--edges", str(_write_edges(tmp_path)),
            "--config", str(_write_config(tmp_path)),
            "--dry-run",
        )
        assert result.returncode == 0
        assert "Analysis plan" in result.stdout
        assert "dry-run" in result.stdout.lower()
        assert "Block model" in result.stdout

    def test_missing_edges_file(self, tmp_path: Path) -> None:
        result = self._run("--edges", str(tmp_path / "missing.txt"))
        assert result.returncode == 1
        assert "not found" in result.stderr

    def test_missing_config_file(self, tmp_path: Path) -> None:
        result = self._run(
            "--edges", str(_write_edges(tmp_path)),
            "--config", str(tmp_path / "missing.json"),
        )
        assert result.returncode == 1

    def test_full_run(self, tmp_path: Path) -> None:
        out = tmp_path / "results"
        result = self._run(
            "--edges", str(_write_edges(tmp_path)),
            "--config", str(_write_config(tmp_path)),
            "--output", str(out),
        )
        assert result.returncode == 0, result.stderr
        written = list(out.glob("*/result.json"))
        assert len(written) == 1
        data = json.loads(written[0].read_text())
        assert data["description"] == "pipeline test"
        assert data["metadata"]["edges_path"].endswith("edges.txt")
