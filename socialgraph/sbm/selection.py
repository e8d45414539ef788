"""Block model order selection: restarts per K, best ICL across K.

Every (K, restart) EM run is independent and reads the shared adjacency
array only, so runs may execute on a thread pool. Results are merged by
max-reduction: best lower bound per K (lowest restart index on ties), then
best ICL across K (smallest K on ties).
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor, as_completed

import numpy as np

from socialgraph.config.analysis import SBMConfig
from socialgraph.graph.types import Graph
from socialgraph.reproducibility.seed import derive_rng, resolve_seed
from socialgraph.results.types import DegenerateBlockWarning, NonConvergenceNotice
from socialgraph.sbm.icl import integrated_completed_likelihood
from socialgraph.sbm.init import initial_memberships
from socialgraph.sbm.types import SBMFit, SBMSelection
from socialgraph.sbm.variational import RestartResult, run_variational_em

log = logging.getLogger(__name__)


def resolve_k_range(n: int, config: SBMConfig) -> range:
    """Candidate block counts k_min..k_max for a graph with n nodes.

    Without an explicit k_max the range grows as 2 ln n, bounded by k_cap.
    Block counts above n are dropped.
    """
    if config.k_max is None:
        heuristic = math.ceil(2.0 * math.log(n)) if n > 1 else 1
        k_max = min(config.k_cap, n, max(config.k_min, heuristic))
    else:
        k_max = config.k_max
        if k_max > n:
            log.warning("k_max=%d exceeds node count %d; clamping", k_max, n)
            k_max = n
    if config.k_min > k_max:
        raise ValueError(
            f"k_min ({config.k_min}) exceeds the largest feasible K ({k_max}) "
            f"for a graph with {n} nodes"
        )
    return range(config.k_min, k_max + 1)


def as_adjacency(data: Graph | np.ndarray) -> np.ndarray:
    """Dense adjacency from a Graph, or a validated copy of a matrix."""
    if isinstance(data, Graph):
        return data.to_adjacency_matrix()

    A = np.asarray(data, dtype=np.float64)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Adjacency must be square, got shape {A.shape}")
    if not np.isin(A, (0.0, 1.0)).all():
        raise ValueError("Adjacency entries must be 0 or 1")
    if not np.array_equal(A, A.T):
        raise ValueError("Adjacency must be symmetric")
    if np.any(np.diag(A) != 0):
        raise ValueError("Adjacency diagonal must be zero (no self-loops)")
    return A.copy()


def _run_restart(
    adjacency: np.ndarray, K: int, restart: int, config: SBMConfig, seed: int
) -> RestartResult:
    rng = derive_rng(seed, K, restart)
    Z0 = initial_memberships(
        adjacency, K, restart, config.init_strategy, config.init_smoothing, rng
    )
    result = run_variational_em(
        adjacency,
        Z0,
        restart=restart,
        max_iterations=config.max_iterations,
        tolerance=config.convergence_tolerance,
        epsilon=config.epsilon,
        estimate_proportions=config.estimate_proportions,
        time_budget=config.restart_time_budget,
    )
    if not result.converged:
        log.warning(
            "K=%d restart=%d stopped without converging after %d iterations (%s)",
            K, restart, result.iterations, result.stop_reason,
        )
    return result


def _degenerate_pairs(
    raw_connectivity: np.ndarray, epsilon: float
) -> tuple[tuple[int, int], ...]:
    pinned = (raw_connectivity <= epsilon) | (raw_connectivity >= 1.0 - epsilon)
    rows, cols = np.nonzero(np.triu(pinned))
    return tuple((int(p), int(q)) for p, q in zip(rows, cols))


def _build_fit(
    adjacency: np.ndarray, runs: list[RestartResult], epsilon: float
) -> SBMFit:
    """Keep the restart with the best lower bound and score it."""
    best = runs[0]
    for run in runs[1:]:
        if run.lower_bound > best.lower_bound:
            best = run
    K = best.K

    notices: list[NonConvergenceNotice | DegenerateBlockWarning] = []
    if not best.converged:
        notices.append(
            NonConvergenceNotice(
                K=K,
                restart=best.restart,
                iterations=best.iterations,
                reason=best.stop_reason,
            )
        )
    pairs = _degenerate_pairs(best.raw_connectivity, epsilon)
    if pairs:
        log.warning("K=%d: connectivity pinned at the clip boundary for %s", K, pairs)
        notices.append(DegenerateBlockWarning(K=K, pairs=pairs))

    icl, loglik = integrated_completed_likelihood(
        adjacency, best.memberships, best.connectivity, best.log_proportions
    )
    return SBMFit(
        K=K,
        memberships=best.memberships,
        connectivity=best.connectivity,
        proportions=best.memberships.mean(axis=0),
        icl=icl,
        log_likelihood=loglik,
        lower_bound=best.lower_bound,
        converged=best.converged,
        iterations=best.iterations,
        restart=best.restart,
        restart_bounds=tuple(run.lower_bound for run in runs),
        notices=tuple(notices),
    )


def fit_block_model(
    data: Graph | np.ndarray, K: int, config: SBMConfig, seed: int | None = None
) -> SBMFit:
    """Fit a K-block SBM with config.restarts restarts, keeping the best.

    Args:
        data: Graph or dense symmetric 0/1 adjacency matrix.
        K: Number of blocks (1 <= K <= n).
        config: Estimator settings.
        seed: Master seed; defaults to config.random_seed.

    Returns:
        SBMFit of the restart with the highest lower bound.
    """
    adjacency = as_adjacency(data)
    n = adjacency.shape[0]
    if n < 2:
        raise ValueError(f"SBM estimation needs at least 2 nodes, got {n}")
    if not 1 <= K <= n:
        raise ValueError(f"K must be in [1, {n}], got {K}")
    seed = resolve_seed(config.random_seed if seed is None else seed)
    runs = [
        _run_restart(adjacency, K, r, config, seed) for r in range(config.restarts)
    ]
    return _build_fit(adjacency, runs, config.epsilon)


def select_block_model(data: Graph | np.ndarray, config: SBMConfig) -> SBMSelection:
    """Fit every K in the candidate range and select the maximal ICL.

    Args:
        data: Graph or dense symmetric 0/1 adjacency matrix.
        config: Estimator settings (range, restarts, EM controls, workers).

    Returns:
        SBMSelection holding the fit for every evaluated K.

    Raises:
        ValueError: If the graph has fewer than 2 nodes or the K range is
            infeasible.
    """
    adjacency = as_adjacency(data)
    n = adjacency.shape[0]
    if n < 2:
        raise ValueError(f"SBM estimation needs at least 2 nodes, got {n}")

    seed = resolve_seed(config.random_seed)
    k_range = resolve_k_range(n, config)
    tasks = [(K, r) for K in k_range for r in range(config.restarts)]
    log.info(
        "Fitting SBM: n=%d, K=%d..%d, %d restarts each, %d worker(s), seed=%d",
        n, k_range.start, k_range.stop - 1, config.restarts, config.n_workers, seed,
    )

    runs: dict[tuple[int, int], RestartResult] = {}
    if config.n_workers == 1:
        for K, r in tasks:
            runs[(K, r)] = _run_restart(adjacency, K, r, config, seed)
    else:
        with ThreadPoolExecutor(max_workers=config.n_workers) as executor:
            futures = {
                executor.submit(_run_restart, adjacency, K, r, config, seed): (K, r)
                for K, r in tasks
            }
            for future in as_completed(futures):
                runs[futures[future]] = future.result()

    fits: dict[int, SBMFit] = {}
    for K in k_range:
        fits[K] = _build_fit(
            adjacency, [runs[(K, r)] for r in range(config.restarts)], config.epsilon
        )
        log.info(
            "K=%d: ICL=%.4f, lower bound=%.4f, converged=%s",
            K, fits[K].icl, fits[K].lower_bound, fits[K].converged,
        )

    best_k = k_range.start
    for K in k_range:
        if fits[K].icl > fits[best_k].icl:
            best_k = K
    log.info("Selected K=%d (ICL=%.4f)", best_k, fits[best_k].icl)

    return SBMSelection(fits=fits, best_k=best_k, seed=seed)
