from __future__ import annotations

from pathlib import Path

import pandas as pd

from revcast_core.domain.models import SimulationResult


def histogram_frame(result: SimulationResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "bucket": i,
                "range_start": b.range_start,
                "range_end": b.range_end,
                "count": b.count,
                "probability": b.probability,
            }
            for i, b in enumerate(result.histogram)
        ]
    )


def write_histogram_csv(result: SimulationResult, csv_path: str | Path) -> Path:
    path = Path(csv_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    histogram_frame(result).to_csv(path, index=False)
    return path
