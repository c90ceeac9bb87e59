#!/usr/bin/env python
"""
Fit an IRT model to binary response data and print items and scores.
"""

from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mirt_engine.core.data import load_csv_to_response_matrix
from mirt_engine.core.exceptions import MIRTError
from mirt_engine.irt import MIRTEstimator, compute_item_fit_comparison
from mirt_engine.irt.estimation.abilities import estimate_abilities
from mirt_engine.irt.estimation.config import (
    DEFAULT_LEARNING_RATE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_QUADRATURE_POINTS,
    EstimationConfig,
    FitOptions,
    QuadratureConfig,
)
from mirt_engine.irt.estimation.data_models import CycleReport
from mirt_engine.irt.estimation.enums import ModelType

console = Console(force_terminal=True, legacy_windows=True)
app = typer.Typer()


@app.command()
def main(
    input_path: Path = typer.Argument(
        ...,
        help="Path to CSV file with responses (columns: respondent_id, answer_string)",
    ),
    model_type: ModelType = typer.Option(
        ModelType.TWO_PL,
        "-m",
        "--model-type",
        help="Model family to fit",
    ),
    max_iter: int = typer.Option(
        DEFAULT_MAX_ITERATIONS,
        "--max-iter",
        help="Maximum number of EM cycles",
    ),
    learning_rate: float = typer.Option(
        DEFAULT_LEARNING_RATE,
        "--learning-rate",
        help="Step size of the M-step gradient update",
    ),
    dimensions: int = typer.Option(
        1,
        "-d",
        "--dimensions",
        help="Number of latent dimensions",
    ),
    n_points: int = typer.Option(
        DEFAULT_QUADRATURE_POINTS,
        "--n-points",
        help="Number of quadrature nodes",
    ),
    verbose: bool = typer.Option(
        False,
        "-v",
        "--verbose",
        help="Print every EM cycle",
    ),
) -> None:
    """Fit an IRT model to 0/1 response data and print the results."""

    # Validate input
    if not input_path.exists():
        console.print(f"[red]File not found: {input_path}[/red]")
        raise typer.Exit(1)
    if input_path.suffix != ".csv":
        console.print("[red]Only .csv files are supported[/red]")
        raise typer.Exit(1)

    # Load data
    console.print("[dim]Loading data...[/dim]")
    try:
        respondent_ids, data = load_csv_to_response_matrix(input_path)
    except MIRTError as e:
        console.print(f"[red]Error loading CSV: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(
        Panel(
            f"[bold]Fit IRT Model[/bold]\n\n"
            f"Input: [cyan]{input_path}[/cyan]\n"
            f"Respondents: [cyan]{data.n_respondents}[/cyan]\n"
            f"Items: [cyan]{data.n_items}[/cyan]\n"
            f"Model: [cyan]{model_type.value}[/cyan] "
            f"([cyan]{dimensions}[/cyan] dimension(s))",
            title="Configuration",
        )
    )

    try:
        options = FitOptions(
            model_type=model_type,
            max_iter=max_iter,
            learning_rate=learning_rate,
        )
        estimator = MIRTEstimator(
            dimensions=dimensions,
            config=EstimationConfig(
                quadrature=QuadratureConfig(n_points=n_points)
            ),
        )
    except MIRTError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1) from e

    def print_cycle(report: CycleReport) -> None:
        console.print(
            f"  cycle {report.cycle}: LL={report.log_likelihood:.4f}, "
            f"max change={report.max_change:.6f}"
        )

    # Fit model
    console.print("[dim]Fitting IRT model...[/dim]")
    result = estimator.fit(
        data, options, on_cycle=print_cycle if verbose else None
    )
    console.print(
        f"  {result.convergence_status.value} "
        f"({result.n_iterations} cycles, LL={result.log_likelihood:.2f})"
    )

    abilities = estimate_abilities(data, result.items, estimator.quadrature)
    comparison = compute_item_fit_comparison(
        data, result.items, abilities.eap
    )

    item_table = Table(title="Fitted Items")
    item_table.add_column("Item", justify="right")
    item_table.add_column("a", justify="right")
    item_table.add_column("d", justify="right")
    item_table.add_column("c", justify="right")
    item_table.add_column("gamma", justify="right")
    item_table.add_column("Observed p", justify="right")
    item_table.add_column("Model p", justify="right")
    for idx, item in enumerate(result.items):
        item_table.add_row(
            str(idx),
            ", ".join(f"{a:.3f}" for a in item.a),
            f"{item.d:.3f}",
            f"{item.c:.2f}",
            f"{item.gamma:.2f}",
            f"{comparison.observed_prob[idx]:.3f}",
            f"{comparison.model_prob[idx]:.3f}",
        )
    console.print(item_table)

    score_table = Table(title="Respondent Scores (EAP)")
    score_table.add_column("Respondent")
    score_table.add_column("Theta", justify="right")
    score_table.add_column("SE", justify="right")
    for rid, eap, se in zip(
        respondent_ids, abilities.eap, abilities.se, strict=True
    ):
        score_table.add_row(rid, f"{eap:.3f}", f"{se:.3f}")
    console.print(score_table)

    max_abs_diff = float(np.nanmax(np.abs(comparison.difference)))
    console.print(
        Panel(
            f"[bold green]Done[/bold green]\n\n"
            f"Max |observed - model| proportion correct: "
            f"[cyan]{max_abs_diff:.4f}[/cyan]",
            title="Summary",
        )
    )


if __name__ == "__main__":
    app()
