"""Result schema validation and writing.

Uses a Python validation function (not jsonschema) to check required fields,
types, per-node array lengths and the zero-substitution policy before
writing result.json files.
"""

import json
import math
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from socialgraph.config.analysis import AnalysisConfig
from socialgraph.config.hashing import full_config_hash, sbm_config_hash
from socialgraph.graph.types import Graph
from socialgraph.reproducibility.provenance import get_git_hash, library_versions
from socialgraph.results.run_id import generate_run_id
from socialgraph.results.types import Notice

SCHEMA_VERSION = "1.0"

REQUIRED_TOP_FIELDS = {
    "schema_version",
    "run_id",
    "timestamp",
    "description",
    "tags",
    "config",
    "graph",
    "metrics",
    "sbm",
    "notices",
}

NODE_METRICS = ("degree", "betweenness", "closeness", "local_clustering")


def notice_to_dict(notice: Notice) -> dict[str, Any]:
    """Plain dict of a notice, tagged with its type name."""
    return {"type": type(notice).__name__, **asdict(notice)}


def graph_summary(graph: Graph) -> dict[str, Any]:
    return {
        "n": graph.node_count(),
        "m": graph.edge_count(),
        "density": graph.density(),
        "labels": list(graph.labels) if graph.labels is not None else None,
    }


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _validate_metrics(metrics: dict[str, Any], n: int | None) -> list[str]:
    errors: list[str] = []
    for name in NODE_METRICS:
        block = metrics.get(name)
        if not isinstance(block, dict):
            errors.append(f"metrics.{name} is required and must be a dict")
            continue
        values = block.get("values")
        if not isinstance(values, list):
            errors.append(f"metrics.{name}.values must be a list")
            continue
        if n is not None and len(values) != n:
            errors.append(
                f"metrics.{name}.values length ({len(values)}) != n ({n})"
            )
        # Undefined entries must already be zero-substituted
        if not all(_is_finite_number(v) for v in values):
            errors.append(f"metrics.{name}.values contains non-finite entries")

    transitivity = metrics.get("global_transitivity")
    if not _is_finite_number(transitivity):
        errors.append("metrics.global_transitivity must be a finite number")
    elif not 0.0 <= transitivity <= 1.0:
        errors.append(
            f"metrics.global_transitivity out of [0, 1]: {transitivity}"
        )
    return errors


def _validate_sbm(sbm: dict[str, Any], n: int | None) -> list[str]:
    errors: list[str] = []
    for field in ("selected_k", "icl_by_k", "block_assignment"):
        if field not in sbm:
            errors.append(f"sbm missing field: {field}")
    if errors:
        return errors

    icl_by_k = sbm["icl_by_k"]
    if not isinstance(icl_by_k, dict) or not icl_by_k:
        return ["sbm.icl_by_k must be a non-empty dict"]
    if not all(_is_finite_number(v) for v in icl_by_k.values()):
        errors.append("sbm.icl_by_k contains non-finite scores")
    selected = str(sbm["selected_k"])
    if selected not in icl_by_k:
        errors.append(f"sbm.selected_k {selected} not among evaluated K")
    elif icl_by_k[selected] < max(icl_by_k.values()):
        errors.append(f"sbm.selected_k {selected} does not maximize ICL")

    assignment = sbm["block_assignment"]
    if n is not None and len(assignment) != n:
        errors.append(
            f"sbm.block_assignment length ({len(assignment)}) != n ({n})"
        )
    return errors


def validate_result(result: dict[str, Any]) -> list[str]:
    """Validate a result dict against the project schema.

    Returns a list of error strings. An empty list means the result is valid.

    Checks:
    - All required top-level fields are present
    - schema_version is a string, tags a list, config a dict
    - timestamp parses as ISO 8601
    - graph.n and graph.m are present
    - per-node metric arrays have length n and hold only finite numbers
    - global transitivity lies in [0, 1]
    - sbm (when not null) selects the arg-max ICL and assigns every node
    """
    errors: list[str] = []

    missing = REQUIRED_TOP_FIELDS - set(result.keys())
    if missing:
        errors.append(f"Missing required top-level fields: {sorted(missing)}")

    if "schema_version" in result and not isinstance(result["schema_version"], str):
        errors.append("schema_version must be a string")

    if "tags" in result and not isinstance(result["tags"], list):
        errors.append("tags must be a list")

    if "config" in result and not isinstance(result["config"], dict):
        errors.append("config must be a dict")

    if "notices" in result and not isinstance(result["notices"], list):
        errors.append("notices must be a list")

    if "timestamp" in result:
        ts = result["timestamp"]
        if not isinstance(ts, str):
            errors.append("timestamp must be a string")
        else:
            try:
                datetime.fromisoformat(ts)
            except ValueError:
                errors.append("timestamp must be in ISO 8601 format")

    n = None
    graph = result.get("graph")
    if graph is not None:
        if not isinstance(graph, dict) or "n" not in graph or "m" not in graph:
            errors.append("graph must be a dict with n and m")
        else:
            n = graph["n"]

    if "metrics" in result:
        if not isinstance(result["metrics"], dict):
            errors.append("metrics must be a dict")
        else:
            errors.extend(_validate_metrics(result["metrics"], n))

    sbm = result.get("sbm")
    if sbm is not None:
        if not isinstance(sbm, dict):
            errors.append("sbm must be a dict or null")
        else:
            errors.extend(_validate_sbm(sbm, n))

    return errors


def build_result(
    config: AnalysisConfig,
    graph: Graph,
    metrics: dict[str, Any],
    sbm: dict[str, Any] | None,
    notices: list[Notice],
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble the result dict without touching the filesystem."""
    return {
        "schema_version": SCHEMA_VERSION,
        "run_id": generate_run_id(config, graph),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "description": config.description,
        "tags": list(config.tags),
        "config": asdict(config),
        "graph": graph_summary(graph),
        "metrics": metrics,
        "sbm": sbm,
        "notices": [notice_to_dict(n) for n in notices],
        "metadata": {
            "code_hash": get_git_hash(),
            "config_hash": full_config_hash(config),
            "sbm_config_hash": sbm_config_hash(config),
            "libraries": library_versions(),
            **(metadata or {}),
        },
    }


def write_result(result: dict[str, Any], results_dir: str | Path = "results") -> Path:
    """Validate result and write it to results_dir/{run_id}/result.json.

    Returns:
        Path of the written result.json.

    Raises:
        ValueError: If the result fails validation.
    """
    errors = validate_result(result)
    if errors:
        raise ValueError(
            "Result validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    out_dir = Path(results_dir) / result["run_id"]
    out_dir.mkdir(parents=True, exist_ok=True)
    result_path = out_dir / "result.json"
    with open(result_path, "w") as f:
        json.dump(result, f, indent=2)
    return result_path


def load_result(result_path: str | Path) -> dict[str, Any]:
    """Load and validate a result.json file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the loaded result fails validation.
    """
    path = Path(result_path)
    with open(path) as f:
        result = json.load(f)

    errors = validate_result(result)
    if errors:
        raise ValueError(
            f"Result validation failed for {path}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )
    return result
