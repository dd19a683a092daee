# dim_scorekeeper/charts.py
from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from .standings import running_totals  # noqa: E402
from .state import GameState  # noqa: E402


def plot_running_totals(game_state: GameState, path: str | Path) -> Path:
    """Plot each player's cumulative score per completed round to a PNG."""
    totals = running_totals(game_state)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(10, 6))
    positions = range(1, len(totals.index) + 1)
    for name in totals.columns:
        ax.plot(list(positions), totals[name].tolist(), marker="o", label=name)

    ax.set_xticks(list(positions))
    ax.set_xticklabels([str(n) for n in totals.index])
    ax.set_xlabel("Round (tricks dealt)")
    ax.set_ylabel("Total score")
    ax.set_title("Running totals")
    ax.grid(True, linestyle=":", alpha=0.5)
    if len(totals.columns):
        ax.legend()
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path
