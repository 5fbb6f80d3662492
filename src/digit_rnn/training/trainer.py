"""Epoch loop for recurrent digit classifiers."""

from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import torch
from torch import Tensor
from torch.nn import functional as F

from ..errors import TrainingError

EpochCallback = Callable[[int, float], None]


class SequenceClassifierTrainer:
    """Minimal cross-entropy training loop reporting the mean loss per epoch."""

    def __init__(
        self,
        model,
        *,
        optimizer: torch.optim.Optimizer,
        device: Optional[torch.device | str] = None,
    ) -> None:
        self.model = model
        self.device = torch.device(device or "cpu")
        self.model.to(self.device)
        self.optimizer = optimizer
        self.step = 0

    def train_step(self, batch: Tuple[Tensor, Tensor]) -> Dict[str, float]:
        """Execute a single optimisation step."""

        self.model.train()
        inputs, targets = self._move_batch(batch)
        logits = self.model(inputs)
        loss = F.cross_entropy(logits, targets)
        value = float(loss.detach())
        if not math.isfinite(value):
            raise TrainingError(f"loss became non-finite ({value}) at step {self.step}")
        self.optimizer.zero_grad()
        loss.backward()
        self.optimizer.step()
        self.step += 1
        return {"loss": value, "samples": float(targets.numel())}

    def train_epoch(self, loader: Iterable[Tuple[Tensor, Tensor]]) -> float:
        """Iterate once over ``loader`` and return the sample-weighted mean loss."""

        total_loss = 0.0
        total_samples = 0.0
        for batch in loader:
            metrics = self.train_step(batch)
            total_loss += metrics["loss"] * metrics["samples"]
            total_samples += metrics["samples"]
        if total_samples == 0:
            raise TrainingError("training loader produced no samples")
        return total_loss / total_samples

    def fit(
        self,
        loader: Iterable[Tuple[Tensor, Tensor]],
        epochs: int,
        *,
        on_epoch_end: Optional[EpochCallback] = None,
    ) -> List[float]:
        """Train for ``epochs`` passes, calling ``on_epoch_end(epoch_index, loss)``."""

        if epochs <= 0:
            raise ValueError("epochs must be positive")
        losses: List[float] = []
        for epoch in range(epochs):
            loss = self.train_epoch(loader)
            losses.append(loss)
            if on_epoch_end is not None:
                on_epoch_end(epoch, loss)
        return losses

    def _move_batch(self, batch: Tuple[Tensor, Tensor]) -> Tuple[Tensor, Tensor]:
        inputs, targets = batch
        return inputs.to(self.device), targets.to(self.device)


__all__ = ["EpochCallback", "SequenceClassifierTrainer"]
