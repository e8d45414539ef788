"""Bernoulli stochastic block model: variational EM with ICL order selection."""

from socialgraph.sbm.icl import icl_penalty, integrated_completed_likelihood
from socialgraph.sbm.init import (
    initial_memberships,
    perturbed_labels,
    soften,
    spectral_labels,
)
from socialgraph.sbm.selection import (
    as_adjacency,
    fit_block_model,
    resolve_k_range,
    select_block_model,
)
from socialgraph.sbm.types import SBMFit, SBMSelection
from socialgraph.sbm.variational import (
    RestartResult,
    e_step,
    expected_log_likelihood,
    lower_bound,
    m_step,
    run_variational_em,
)

__all__ = [
    "RestartResult",
    "SBMFit",
    "SBMSelection",
    "as_adjacency",
    "e_step",
    "expected_log_likelihood",
    "fit_block_model",
    "icl_penalty",
    "initial_memberships",
    "integrated_completed_likelihood",
    "lower_bound",
    "m_step",
    "perturbed_labels",
    "resolve_k_range",
    "run_variational_em",
    "select_block_model",
    "soften",
    "spectral_labels",
]
