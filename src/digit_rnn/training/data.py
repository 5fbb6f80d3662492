"""Turn an observation history into supervised next-digit pairs."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import torch
from torch.utils.data import DataLoader, TensorDataset


def build_training_pairs(history: Sequence[int]) -> Tuple[List[float], List[int]]:
    """Return ``(inputs, targets)`` for every adjacent pair in ``history``.

    ``inputs[i]`` is ``history[i]`` as a scalar and ``targets[i]`` is the digit
    that followed it, so a history of ``N`` digits yields ``N - 1`` pairs.
    """

    if len(history) < 2:
        raise ValueError("history must contain at least two observations")
    inputs = [float(value) for value in history[:-1]]
    targets = [int(value) for value in history[1:]]
    return inputs, targets


def make_pair_loader(
    inputs: Sequence[float],
    targets: Sequence[int],
    *,
    batch_size: int,
    shuffle: bool = True,
    generator: Optional[torch.Generator] = None,
) -> DataLoader:
    """Wrap scalar inputs as length-one sequences in a :class:`DataLoader`."""

    if len(inputs) != len(targets):
        raise ValueError("inputs and targets must have equal length")
    if not inputs:
        raise ValueError("at least one training pair is required")
    x = torch.tensor(list(inputs), dtype=torch.float32).reshape(-1, 1, 1)
    y = torch.tensor(list(targets), dtype=torch.long)
    dataset = TensorDataset(x, y)
    return DataLoader(dataset, batch_size=batch_size, shuffle=shuffle, generator=generator)


__all__ = ["build_training_pairs", "make_pair_loader"]
