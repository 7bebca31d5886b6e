import json
from pathlib import Path

from typer.testing import CliRunner

from revcast_core.cli import app


runner = CliRunner()


def test_cli_simulate_and_compare(tmp_path: Path):
    first_path = tmp_path / "first.json"
    second_path = tmp_path / "second.json"
    csv_path = tmp_path / "histogram.csv"

    base_args = [
        "simulate",
        "--base-mrr",
        "100000",
        "--iterations",
        "200",
        "--months",
        "12",
        "--growth",
        "0.05",
        "--churn",
        "0.03",
        "--expansion",
        "0.08",
        "--target",
        "300000",
        "--seed",
        "1",
    ]
    result_first = runner.invoke(app, base_args + ["--out", str(first_path)])
    assert result_first.exit_code == 0, result_first.stdout
    assert first_path.exists()

    payload = json.loads(first_path.read_text())
    assert abs(payload["results"]["percentiles"]["p50"] - 100000 * 1.1**12) < 1e-3
    assert payload["results"]["probabilityOfTarget"] == 100.0
    assert payload["insights"]["riskLevel"] == "low"

    result_second = runner.invoke(
        app,
        base_args
        + ["--workers", "2", "--previous", str(first_path), "--histogram-csv", str(csv_path), "--out", str(second_path)],
    )
    assert result_second.exit_code == 0, result_second.stdout
    second = json.loads(second_path.read_text())
    assert abs(second["baselineComparison"]["p50Change"]) < 1e-3
    assert csv_path.exists()

    result_summary = runner.invoke(app, ["summary", str(second_path)])
    assert result_summary.exit_code == 0, result_summary.stdout
    assert "P50" in result_summary.stdout


def test_cli_simulate_from_request_file(tmp_path: Path):
    request_path = tmp_path / "request.json"
    request_path.write_text(
        json.dumps(
            {
                "simulationName": "board deck",
                "numIterations": 150,
                "timeHorizonMonths": 3,
                "baseMRR": 5000,
                "parameters": {"avgGrowthRate": 0.02, "growthVolatility": 0.01},
            }
        )
    )
    out = tmp_path / "out.json"
    result = runner.invoke(app, ["simulate", "--request", str(request_path), "--seed", "3", "--out", str(out)])
    assert result.exit_code == 0, result.stdout
    payload = json.loads(out.read_text())
    assert payload["simulationName"] == "board deck"
    assert sum(b["count"] for b in payload["results"]["histogram"]) == 150


def test_cli_rejects_invalid_parameters():
    result = runner.invoke(app, ["simulate", "--base-mrr", "1000", "--iterations", "0"])
    assert result.exit_code == 2


def test_cli_rejects_non_finite_base_mrr():
    result = runner.invoke(app, ["simulate", "--base-mrr", "nan", "--iterations", "10"])
    assert result.exit_code == 2


def test_cli_scenario_preset(tmp_path: Path):
    out = tmp_path / "scenario.json"
    result = runner.invoke(
        app,
        [
            "scenario",
            "--preset",
            "conservative",
            "--base-mrr",
            "10000",
            "--iterations",
            "100",
            "--months",
            "6",
            "--churn",
            "0.02",
            "--expansion",
            "0.01",
            "--seed",
            "5",
            "--out",
            str(out),
        ],
    )
    assert result.exit_code == 0, result.stdout
    payload = json.loads(out.read_text())
    assert payload["delta"]["p50"] < 0
    assert payload["netRevenueRetention"]["scenario"] < payload["netRevenueRetention"]["baseline"]
