"""
Main CLI application for hshmm.

Provides commands to inspect marginal state probabilities, print model
diagnostics and sample hidden state paths.
"""

import sys
from pathlib import Path
from typing import Optional

import numpy as np
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config import load_config_file
from ..logger import configure_logging, set_log_level
from ..simulate import sample_state_path, empirical_state_frequencies
from .errors import handle_cli_error, EXIT_CODES
from .utils import build_model, handle_error, option_or_config

console = Console()

app = typer.Typer(
    name="hshmm",
    help="Hidden Markov Models with continuous emissions: marginals, diagnostics and sampling",
    add_completion=False,
    no_args_is_help=True
)

STATES_OPTION = typer.Option(None, "--states", "-s", help="Number of hidden states")
DIMS_OPTION = typer.Option(None, "--dims", "-d", help="Observation dimensionality")
HORIZON_OPTION = typer.Option(None, "--horizon", "-T", help="Number of time steps")
POLICY_OPTION = typer.Option(None, "--policy", "-p", help="Initialization policy: uniform or biased")
FAMILY_OPTION = typer.Option(None, "--family", help="Emission family: gaussian or diagonal_gaussian")
SEED_OPTION = typer.Option(None, "--seed", help="Random seed")


def _print_heading(title: str) -> None:
    console.print(f"\n[bold]{title}[/bold]")


def _print_marginal_table(title: str, probabilities: np.ndarray) -> None:
    n_states, horizon = probabilities.shape
    table = Table()
    table.add_column("t", justify="right", style="cyan")
    for i in range(n_states):
        table.add_column(f"state {i}", justify="right")
    for t in range(horizon):
        table.add_row(str(t), *[f"{p:.4f}" for p in probabilities[:, t]])
    _print_heading(title)
    console.print(table)


@app.command("version")
def show_version():
    """Show hshmm version information."""
    from .. import __version__

    console.print(Panel.fit(
        f"[bold]hshmm Version {__version__}[/bold]\n"
        f"Hidden Markov Models with continuous emissions\n"
        f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        border_style="blue"
    ))


@app.command("marginals")
def show_marginals(
    n_states: Optional[int] = STATES_OPTION,
    n_dims: Optional[int] = DIMS_OPTION,
    horizon: Optional[int] = HORIZON_OPTION,
    policy: Optional[str] = POLICY_OPTION,
    family: Optional[str] = FAMILY_OPTION,
    seed: Optional[int] = SEED_OPTION
):
    """
    Print P(q_t = s_i) for every time step, ignoring observations.
    """
    try:
        model = build_model(n_states, n_dims, horizon, policy, family, seed)
        _print_marginal_table("Marginal state probabilities", model.marginal_prob)
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(e, "marginals")


@app.command("report")
def show_report(
    n_states: Optional[int] = STATES_OPTION,
    n_dims: Optional[int] = DIMS_OPTION,
    horizon: Optional[int] = HORIZON_OPTION,
    policy: Optional[str] = POLICY_OPTION,
    family: Optional[str] = FAMILY_OPTION,
    seed: Optional[int] = SEED_OPTION,
    name: str = typer.Option("", "--name", "-n", help="Label printed in the report header")
):
    """
    Print initial probabilities, transition matrix and emission parameters.
    """
    try:
        model = build_model(n_states, n_dims, horizon, policy, family, seed)

        table = Table()
        table.add_column("from", style="cyan")
        table.add_column("initial", justify="right")
        for j in range(model.n_states):
            table.add_column(f"-> {j}", justify="right")
        for i in range(model.n_states):
            table.add_row(
                str(i),
                f"{model.initial_prob[i]:.4f}",
                *[f"{p:.4f}" for p in model.transition[i]]
            )
        _print_heading(f"HMM {name}".strip())
        console.print(table)

        for i, distribution in enumerate(model.emission_distributions):
            body = Text(f"mu:\n{np.array2string(distribution.mu, precision=4)}\n"
                        f"sigma:\n{np.array2string(distribution.sigma, precision=4)}")
            console.print(Panel(body, title=f"state {i + 1}", border_style="green"))
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(e, "report")


@app.command("simulate")
def simulate(
    n_states: Optional[int] = STATES_OPTION,
    n_dims: Optional[int] = DIMS_OPTION,
    horizon: Optional[int] = HORIZON_OPTION,
    policy: Optional[str] = POLICY_OPTION,
    family: Optional[str] = FAMILY_OPTION,
    seed: Optional[int] = SEED_OPTION,
    n_paths: Optional[int] = typer.Option(None, "--paths", help="Number of state paths to draw")
):
    """
    Draw hidden state paths and compare their occupancy with the marginals.
    """
    try:
        n_paths = option_or_config(n_paths, 'sampling', 'n_paths')
        if n_paths <= 0:
            console.print("[red]--paths must be positive[/red]")
            raise typer.Exit(EXIT_CODES["invalid_usage"])

        model = build_model(n_states, n_dims, horizon, policy, family, seed)
        paths = [sample_state_path(model) for _ in range(n_paths)]

        table = Table()
        table.add_column("path", justify="right", style="cyan")
        table.add_column("states")
        for k, path in enumerate(paths):
            table.add_row(str(k), " ".join(str(s) for s in path))
        _print_heading(f"Sampled state paths ({n_paths})")
        console.print(table)

        frequencies = empirical_state_frequencies(paths, model.n_states, model.horizon)
        _print_marginal_table("Empirical occupancy", frequencies)
        _print_marginal_table("Marginal state probabilities", model.marginal_prob)
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(e, "simulate")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all logging except errors"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on errors"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to JSON configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False
    )
):
    """
    hshmm: Hidden Markov Models with continuous emissions.

    \b
    Quick Start:
    1. Marginals:    hshmm marginals --states 3 --horizon 10
    2. Diagnostics:  hshmm report --policy uniform
    3. Sampling:     hshmm simulate --paths 20 --seed 7
    """
    ctx.meta["debug"] = debug

    # Config file first so its logging section is what gets applied
    try:
        if config_file:
            load_config_file(str(config_file))
        configure_logging()
    except ValueError as e:
        handle_cli_error(e, "configuration", debug)

    # Command-line flags override the configured level
    if quiet:
        set_log_level('ERROR')
    elif verbose or debug:
        set_log_level('DEBUG')


def cli_main():
    """Main entry point for CLI with error handling."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(EXIT_CODES["general_error"])


if __name__ == "__main__":
    cli_main()
