"""
Configuration constants.

Centralizes the defaults used by the solver. Every value here is only a
keyword default; constructors and helpers accept explicit overrides.
"""

# =============================================================================
# RANDOMNESS
# =============================================================================

# Master seed for wfc3d.util.rng. The library never seeds the global provider
# on import; entry points call rng.init(config.RANDOM_SEED) before solving.
# RANDOM_SEED = None
RANDOM_SEED = 1337

# Stream used by DiscreteModel when no generator is injected.
RNG_DOMAIN_SOLVE = "wfc.solve"

# =============================================================================
# ADJACENCY MODEL
# =============================================================================

# Record every pattern as a permitted neighbor of itself in all directions.
# Useful for tiny exemplars whose learned rules would otherwise be
# unsatisfiable in a larger output grid.
INCLUDE_SELF_ADJACENCY = False

# =============================================================================
# COLLAPSE
# =============================================================================

# Pick the collapsed pattern proportionally to its registry weight instead of
# uniformly from the remaining domain.
WEIGHTED_COLLAPSE = False

# Number of fresh solve attempts solve_with_retries makes before giving up.
SOLVE_MAX_ATTEMPTS = 5
