from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from revcast_core.domain.errors import InvalidParameters, SimulationCancelled
from revcast_core.domain.models import SimulationParameters, SimulationRequest, SimulationResult
from revcast_core.io import config as config_io
from revcast_core.io import export as export_io
from revcast_core.io import payload as payload_io
from revcast_core.services import insights as insights_service
from revcast_core.services import pipeline
from revcast_core.services import scenario as scenario_service
from revcast_core.services import simulator
from revcast_core.services.random_source import SeededRandomSource

app = typer.Typer(help="Revenue forecasting CLI: Monte Carlo MRR simulation and what-if scenarios.")


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


def _emit(payload: dict, out: Optional[Path], label: str) -> None:
    if out:
        _save_json(out, payload)
        typer.echo(f"{label} written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


def _build_request(
    request_file: Optional[Path],
    name: str,
    base_mrr: Optional[float],
    iterations: int,
    months: int,
    growth: float,
    growth_vol: float,
    churn: float,
    churn_vol: float,
    expansion: float,
    expansion_vol: float,
    seasonality: float,
    target: Optional[float],
) -> SimulationRequest:
    if request_file:
        return config_io.load_simulation_request(request_file)
    if base_mrr is None:
        raise typer.BadParameter("Provide either --request or --base-mrr")
    params = SimulationParameters(
        base_mrr=base_mrr,
        iterations=iterations,
        horizon_months=months,
        avg_growth_rate=growth,
        growth_volatility=growth_vol,
        avg_churn_rate=churn,
        churn_volatility=churn_vol,
        avg_expansion_rate=expansion,
        expansion_volatility=expansion_vol,
        seasonality_factor=seasonality,
        target_value=target,
    ).validate()
    return SimulationRequest(parameters=params, simulation_name=name)


def _run(params: SimulationParameters, seed: Optional[int], workers: int, timeout: Optional[float]) -> SimulationResult:
    deadline = time.monotonic() + timeout if timeout else None
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=Console(stderr=True),
    ) as progress:
        task = progress.add_task(f"Simulating {params.iterations:,} trajectories...", total=None)
        if workers > 1:
            result = simulator.run_monte_carlo_parallel(params, seed, workers=workers, deadline=deadline)
        else:
            result = simulator.run_monte_carlo(params, SeededRandomSource(seed), deadline=deadline)
        progress.update(task, advance=1)
    return result


@app.command()
def simulate(
    request: Optional[Path] = typer.Option(None, help="JSON request body (camelCase fields)"),
    name: str = typer.Option("", help="Simulation name"),
    base_mrr: Optional[float] = typer.Option(None, help="Starting monthly recurring revenue"),
    iterations: int = typer.Option(10000, help="Number of trajectories"),
    months: int = typer.Option(12, help="Horizon in months"),
    growth: float = typer.Option(0.0, help="Mean monthly new-business growth rate"),
    growth_vol: float = typer.Option(0.0, help="Std dev of monthly growth"),
    churn: float = typer.Option(0.0, help="Mean monthly churn rate"),
    churn_vol: float = typer.Option(0.0, help="Std dev of monthly churn"),
    expansion: float = typer.Option(0.0, help="Mean monthly expansion rate"),
    expansion_vol: float = typer.Option(0.0, help="Std dev of monthly expansion"),
    seasonality: float = typer.Option(0.0, help="Seasonal amplitude (12-month period)"),
    target: Optional[float] = typer.Option(None, help="Target MRR for hit probability"),
    seed: Optional[int] = typer.Option(None, help="Random seed"),
    workers: int = typer.Option(1, help="Worker threads; >1 runs block-parallel"),
    timeout: Optional[float] = typer.Option(None, help="Abort the run after this many seconds"),
    previous: Optional[Path] = typer.Option(None, help="Previous result JSON to compare against"),
    histogram_csv: Optional[Path] = typer.Option(None, help="Also write the histogram as CSV"),
    out: Optional[Path] = typer.Option(None, help="Output path for result JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress"),
):
    """Run the Monte Carlo MRR forecast."""
    _configure_logging(verbose)
    try:
        sim_request = _build_request(
            request, name, base_mrr, iterations, months, growth, growth_vol,
            churn, churn_vol, expansion, expansion_vol, seasonality, target,
        )
        result = _run(sim_request.parameters, seed, workers, timeout)
        payload = payload_io.response_payload(sim_request, result, insights_service.build_insights(result))
        if previous:
            comparison = pipeline.compare_to_baseline(result, config_io.read_json(previous))
            payload["baselineComparison"] = payload_io.baseline_comparison_to_json(comparison)
    except InvalidParameters as exc:
        typer.echo(f"Invalid parameters: {exc}", err=True)
        raise typer.Exit(code=2)
    except SimulationCancelled as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if histogram_csv:
        export_io.write_histogram_csv(result, histogram_csv)
    _emit(payload, out, "Simulation")


@app.command()
def scenario(
    preset: Optional[str] = typer.Option(None, help="Scenario preset: optimistic|conservative"),
    delta: Optional[Path] = typer.Option(None, help="Scenario adjustment JSON"),
    request: Optional[Path] = typer.Option(None, help="JSON request body (camelCase fields)"),
    base_mrr: Optional[float] = typer.Option(None, help="Starting monthly recurring revenue"),
    iterations: int = typer.Option(10000, help="Number of trajectories"),
    months: int = typer.Option(12, help="Horizon in months"),
    growth: float = typer.Option(0.0, help="Mean monthly new-business growth rate"),
    growth_vol: float = typer.Option(0.0, help="Std dev of monthly growth"),
    churn: float = typer.Option(0.0, help="Mean monthly churn rate"),
    churn_vol: float = typer.Option(0.0, help="Std dev of monthly churn"),
    expansion: float = typer.Option(0.0, help="Mean monthly expansion rate"),
    expansion_vol: float = typer.Option(0.0, help="Std dev of monthly expansion"),
    seasonality: float = typer.Option(0.0, help="Seasonal amplitude (12-month period)"),
    target: Optional[float] = typer.Option(None, help="Target MRR for hit probability"),
    seed: Optional[int] = typer.Option(None, help="Random seed shared by both runs"),
    out: Optional[Path] = typer.Option(None, help="Output path for comparison JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress"),
):
    """Compare a baseline run with a what-if scenario."""
    _configure_logging(verbose)
    if (preset is None) == (delta is None):
        raise typer.BadParameter("Provide exactly one of --preset or --delta")
    try:
        sim_request = _build_request(
            request, "", base_mrr, iterations, months, growth, growth_vol,
            churn, churn_vol, expansion, expansion_vol, seasonality, target,
        )
        if preset:
            adjustment = scenario_service.preset_adjustment(preset)
        else:
            adjustment = config_io.load_scenario_adjustment(delta)
        comparison = pipeline.compare_scenario(sim_request.parameters, adjustment, seed=seed)
    except InvalidParameters as exc:
        typer.echo(f"Invalid parameters: {exc}", err=True)
        raise typer.Exit(code=2)

    payload = payload_io.comparison_to_json(comparison)
    payload["netRevenueRetention"] = {
        "baseline": scenario_service.net_revenue_retention(comparison.baseline.parameters),
        "scenario": scenario_service.net_revenue_retention(comparison.scenario.parameters),
    }
    _emit(payload, out, "Scenario comparison")


@app.command()
def summary(
    result: Path = typer.Argument(..., help="Result JSON written by `simulate --out`"),
):
    """Render a stored simulation result as a table."""
    data = config_io.read_json(result)
    results = data.get("results") or {}
    console = Console()

    table = Table(title=data.get("simulationName") or "Monte Carlo forecast")
    table.add_column("Statistic")
    table.add_column("MRR", justify="right")
    for key, value in (results.get("percentiles") or {}).items():
        table.add_row(key.upper(), f"{value:,.2f}")
    for label, key in (("Mean", "mean"), ("Std dev", "stdDev"), ("Worst case", "worstCase"), ("Best case", "bestCase")):
        if results.get(key) is not None:
            table.add_row(label, f"{results[key]:,.2f}")
    console.print(table)

    prob = results.get("probabilityOfTarget")
    if prob is not None:
        console.print(f"Chance of reaching target: [bold]{prob:.1f}%[/bold]")
    insights = data.get("insights") or {}
    if insights:
        console.print(insights.get("expectedOutcome", ""))
        console.print(insights.get("confidenceRange", ""))
        console.print(f"Risk level: [bold]{insights.get('riskLevel', '?')}[/bold] | Growth probability: {insights.get('growthProbability', '?')}")


if __name__ == "__main__":
    app()
