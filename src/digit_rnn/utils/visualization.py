"""Plotting utilities for training traces."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt


def plot_training_trace(
    trace: Sequence[Tuple[int, float]],
    path: Optional[str | Path] = None,
):
    """Plot loss against epoch and optionally save the figure to ``path``."""

    epochs = [int(epoch) for epoch, _ in trace]
    losses = [float(loss) for _, loss in trace]
    fig = plt.figure()
    plt.plot(epochs, losses, marker="o")
    plt.xlabel("Epoch")
    plt.ylabel("Loss")
    plt.title("Training Loss Over Epochs")
    plt.tight_layout()
    if path is not None:
        fig.savefig(path)
        plt.close(fig)
    return fig
