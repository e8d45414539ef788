"""Analysis configuration dataclasses, all frozen and slotted for immutability."""

from dataclasses import dataclass, field

INIT_STRATEGIES = ("spectral", "random")


@dataclass(frozen=True, slots=True)
class SBMConfig:
    """Stochastic block model estimation parameters.

    k_max=None selects the range heuristically from the node count, bounded
    by k_cap.
    """

    k_min: int = 1
    k_max: int | None = None
    k_cap: int = 10  # upper bound for the heuristic k_max
    restarts: int = 5
    max_iterations: int = 100
    convergence_tolerance: float = 1e-6
    epsilon: float = 1e-10  # log-clip for pi
    random_seed: int | None = 42
    init_strategy: str = "spectral"  # seeds of restarts >= 1: "spectral" or "random"
    init_smoothing: float = 0.2  # mass spread uniformly over blocks at init
    estimate_proportions: bool = False
    n_workers: int = 1
    restart_time_budget: float | None = None  # seconds per restart

    def __post_init__(self) -> None:
        if self.k_min < 1:
            raise ValueError(f"k_min must be >= 1, got {self.k_min}")
        if self.k_max is not None and self.k_max < self.k_min:
            raise ValueError(
                f"k_max ({self.k_max}) must be >= k_min ({self.k_min})"
            )
        if self.k_cap < self.k_min:
            raise ValueError(
                f"k_cap ({self.k_cap}) must be >= k_min ({self.k_min})"
            )
        if self.restarts < 1:
            raise ValueError(f"restarts must be >= 1, got {self.restarts}")
        if self.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )
        if self.convergence_tolerance <= 0:
            raise ValueError(
                f"convergence_tolerance must be > 0, "
                f"got {self.convergence_tolerance}"
            )
        if not 0.0 < self.epsilon < 0.5:
            raise ValueError(f"epsilon must be in (0, 0.5), got {self.epsilon}")
        if self.init_strategy not in INIT_STRATEGIES:
            raise ValueError(
                f"init_strategy must be one of {INIT_STRATEGIES}, "
                f"got {self.init_strategy!r}"
            )
        if not 0.0 <= self.init_smoothing < 1.0:
            raise ValueError(
                f"init_smoothing must be in [0, 1), got {self.init_smoothing}"
            )
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")
        if self.restart_time_budget is not None and self.restart_time_budget < 0:
            raise ValueError(
                f"restart_time_budget must be >= 0, "
                f"got {self.restart_time_budget}"
            )


@dataclass(frozen=True, slots=True)
class CentralityConfig:
    """Centrality reporting parameters."""

    normalized_betweenness: bool = False
    top_k: int = 10  # nodes listed per ranking in the result summary


@dataclass(frozen=True, slots=True)
class BaselineConfig:
    """Erdős–Rényi comparison for global transitivity."""

    n_samples: int = 20
    seed: int = 7

    def __post_init__(self) -> None:
        if self.n_samples < 0:
            raise ValueError(f"n_samples must be >= 0, got {self.n_samples}")


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Top-level analysis configuration composing all sub-configs."""

    sbm: SBMConfig = field(default_factory=SBMConfig)
    centrality: CentralityConfig = field(default_factory=CentralityConfig)
    baseline: BaselineConfig = field(default_factory=BaselineConfig)
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.centrality.top_k < 0:
            raise ValueError(
                f"centrality.top_k must be >= 0, got {self.centrality.top_k}"
            )
