"""Tests for node vectors, result schema validation, writing and run IDs."""

import json
import math
import re

import numpy as np
import pytest

from socialgraph.analysis import analyze_graph
from socialgraph.config import AnalysisConfig, BaselineConfig, SBMConfig
from socialgraph.graph import build_graph, clique_pair_graph
from socialgraph.results import (
    NodeVector,
    build_result,
    generate_run_id,
    load_result,
    validate_result,
    write_result,
)

SMALL_CONFIG = AnalysisConfig(
    sbm=SBMConfig(k_max=3, restarts=2),
    baseline=BaselineConfig(n_samples=3),
    description="schema test",
    tags=("test",),
)


@pytest.fixture(scope="module")
def analysis():
    return analyze_graph(clique_pair_graph(4), SMALL_CONFIG)


@pytest.fixture
def valid_result(analysis):
    return build_result(
        SMALL_CONFIG,
        analysis.graph,
        metrics=analysis.metrics_dict(),
        sbm=analysis.sbm_dict(),
        notices=analysis.notices(),
    )


class TestNodeVector:
    """Zero-substitution and rankings."""

    def test_from_raw_without_nan(self) -> None:
        v = NodeVector.from_raw("closeness", np.array([0.5, 1.0]), "unused")
        assert v.notices == ()

    def test_from_raw_with_nan(self, caplog) -> None:
        v = NodeVector.from_raw("closeness", np.array([np.nan, 1.0, np.nan]), "isolated")
        assert v.notices[0].nodes == (0, 2)
        assert v.notices[0].reason == "isolated"
        assert v.values.tolist() == [0.0, 1.0, 0.0]
        assert np.isnan(v.raw[0])
        assert "undefined for 2 node(s)" in caplog.text

    def test_top_breaks_ties_by_node_id(self) -> None:
        v = NodeVector("degree", np.array([2.0, 3.0, 3.0, np.nan, 1.0]))
        assert v.top(3) == [(1, 3.0), (2, 3.0), (0, 2.0)]
        assert len(v.top(10)) == 5

    def test_summary(self) -> None:
        v = NodeVector("degree", np.array([1.0, np.nan, 3.0]))
        summary = v.summary()
        assert summary["mean"] == pytest.approx(4 / 3)
        assert summary["min"] == 0.0
        assert summary["max"] == 3.0
        assert summary["median"] == 1.0
        assert summary["n_undefined"] == 1

    def test_empty_summary(self) -> None:
        v = NodeVector("degree", np.zeros(0))
        assert len(v) == 0
        assert v.summary()["mean"] == 0.0


class TestValidateResult:
    """validate_result accepts built results and rejects broken ones."""

    def test_built_result_is_valid(self, valid_result) -> None:
        assert validate_result(valid_result) == []

    def test_result_is_json_serializable(self, valid_result) -> None:
        restored = json.loads(json.dumps(valid_result))
        assert validate_result(restored) == []

    def test_missing_fields(self) -> None:
        errors = validate_result({"schema_version": "1.0"})
        assert any("Missing required" in e for e in errors)

    def test_wrong_metric_length(self, valid_result) -> None:
        valid_result["metrics"]["closeness"]["values"].append(0.0)
        errors = validate_result(valid_result)
        assert any("closeness" in e and "length" in e for e in errors)

    def test_nan_metric_rejected(self, valid_result) -> None:
        valid_result["metrics"]["local_clustering"]["values"][0] = math.nan
        errors = validate_result(valid_result)
        assert any("non-finite" in e for e in errors)

    def test_transitivity_out_of_range(self, valid_result) -> None:
        valid_result["metrics"]["global_transitivity"] = 1.5
        errors = validate_result(valid_result)
        assert any("global_transitivity" in e for e in errors)

    def test_selected_k_must_maximize_icl(self, valid_result) -> None:
        sbm = valid_result["sbm"]
        worst = min(sbm["icl_by_k"], key=sbm["icl_by_k"].get)
        sbm["selected_k"] = int(worst)
        errors = validate_result(valid_result)
        assert any("maximize ICL" in e for e in errors)

    def test_null_sbm_allowed(self, valid_result) -> None:
        valid_result["sbm"] = None
        assert validate_result(valid_result) == []

    def test_bad_timestamp(self, valid_result) -> None:
        valid_result["timestamp"] = "yesterday"
        errors = validate_result(valid_result)
        assert any("ISO 8601" in e for e in errors)

    def test_bad_tags_type(self, valid_result) -> None:
        valid_result["tags"] = "not-a-list"
        assert any("tags" in e for e in validate_result(valid_result))


class TestBuildResult:
    def test_metadata(self, valid_result) -> None:
        metadata = valid_result["metadata"]
        assert re.match(r"^[0-9a-f]{16}$", metadata["config_hash"])
        assert re.match(r"^[0-9a-f]{16}$", metadata["sbm_config_hash"])
        assert isinstance(metadata["code_hash"], str) and metadata["code_hash"]
        assert set(metadata["libraries"]) == {
            "numpy", "scipy", "scikit-learn", "dacite",
        }

    def test_extra_metadata_merged(self, analysis) -> None:
        result = build_result(
            SMALL_CONFIG, analysis.graph, analysis.metrics_dict(), None, [],
            metadata={"edges_path": "graph.txt"},
        )
        assert result["metadata"]["edges_path"] == "graph.txt"

    def test_notices_serialized(self) -> None:
        # Isolated node 3 leaves closeness undefined
        graph = build_graph(4, [(0, 1), (1, 2), (0, 2)])
        analysis = analyze_graph(graph, SMALL_CONFIG)
        result = build_result(
            SMALL_CONFIG, graph, analysis.metrics_dict(), analysis.sbm_dict(),
            analysis.notices(),
        )
        closeness = [n for n in result["notices"] if n.get("metric") == "closeness"]
        assert closeness == [{
            "type": "UndefinedMetricWarning",
            "metric": "closeness",
            "nodes": (3,),
            "reason": "no reachable peers",
        }]
        assert validate_result(result) == []


class TestWriteResult:
    def test_write_and_load(self, valid_result, tmp_path) -> None:
        path = write_result(valid_result, results_dir=tmp_path)
        assert path == tmp_path / valid_result["run_id"] / "result.json"
        data = load_result(path)
        assert data["run_id"] == valid_result["run_id"]
        assert data["sbm"]["selected_k"] == valid_result["sbm"]["selected_k"]

    def test_validates_before_write(self, valid_result, tmp_path) -> None:
        valid_result["metrics"]["degree"]["values"] = [math.inf]
        with pytest.raises(ValueError, match="validation failed"):
            write_result(valid_result, results_dir=tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_load_invalid_file(self, tmp_path) -> None:
        bad_file = tmp_path / "result.json"
        bad_file.write_text('{"schema_version": "1.0"}')
        with pytest.raises(ValueError, match="validation failed"):
            load_result(bad_file)


class TestGenerateRunId:
    def test_format(self) -> None:
        graph = clique_pair_graph(4)
        run_id = generate_run_id(SMALL_CONFIG, graph)
        assert re.match(r"^n8_m13_k1-3_s42_\d{8}_\d{6}$", run_id)

    def test_heuristic_range_and_unseeded(self) -> None:
        config = AnalysisConfig(sbm=SBMConfig(random_seed=None))
        run_id = generate_run_id(config, build_graph(3, [(0, 1)]))
        assert run_id.startswith("n3_m1_k1-auto_snone_")
