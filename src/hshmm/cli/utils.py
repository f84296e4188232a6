"""
CLI utility functions.

Common helpers for building models from command options and handling errors.
"""

from typing import Optional

import click

from ..config import get_config
from ..hmm import MarginalHMM, get_emission_factory
from ..exceptions import EmissionError
from .errors import handle_cli_error, ConfigurationError

INIT_POLICIES = ("uniform", "biased")


def debug_enabled() -> bool:
    """Read the global --debug flag from the click context."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return False
    return bool(ctx.find_root().meta.get("debug", False))


def handle_error(error: Exception, operation: str) -> None:
    """Handle and display errors consistently."""
    handle_cli_error(error, operation, debug_enabled())


def option_or_config(value, section: str, key: str):
    """Use the command-line value when given, otherwise the configured one."""
    return value if value is not None else get_config(section, key)


def build_model(n_states: Optional[int] = None,
                n_dims: Optional[int] = None,
                horizon: Optional[int] = None,
                policy: Optional[str] = None,
                family: Optional[str] = None,
                seed: Optional[int] = None) -> MarginalHMM:
    """
    Construct, initialize and finalize a model from CLI options and config.

    Raises:
        ConfigurationError: If the policy or emission family is unknown
    """
    policy = option_or_config(policy, 'hmm', 'init_policy')
    if policy not in INIT_POLICIES:
        raise ConfigurationError(
            f"Unknown initialization policy '{policy}'",
            suggestions=[f"Use one of: {', '.join(INIT_POLICIES)}"]
        )

    try:
        factory = get_emission_factory(option_or_config(family, 'emission', 'family'))
    except EmissionError as e:
        raise ConfigurationError(str(e), suggestions=["Use --family gaussian or --family diagonal_gaussian"])

    model = MarginalHMM(
        n_states=option_or_config(n_states, 'hmm', 'n_states'),
        n_dims=option_or_config(n_dims, 'hmm', 'n_dims'),
        horizon=option_or_config(horizon, 'hmm', 'horizon'),
        emission_factory=factory,
        random_state=option_or_config(seed, 'sampling', 'random_seed')
    )

    if policy == "uniform":
        model.randomly_initialize(finalize=True)
    else:
        model.custom_initialize(finalize=True)

    return model
