"""Trainable next-digit classifier owning its network and optimiser."""

from __future__ import annotations

from typing import List, Optional, Sequence

import torch
from torch.nn import functional as F

from ..errors import TrainingError
from ..training import EpochCallback, SequenceClassifierTrainer, make_pair_loader
from .recurrent import RecurrentDigitNetwork


class DigitClassifier:
    """A compiled recurrent network: parameters, Adam state and fit settings.

    Each instance owns its parameters and optimiser exclusively, so two
    classifiers never influence each other's training.
    """

    def __init__(
        self,
        network: RecurrentDigitNetwork,
        *,
        learning_rate: float = 1e-3,
        batch_size: int = 32,
        shuffle: bool = True,
        device: Optional[torch.device | str] = None,
        generator: Optional[torch.Generator] = None,
    ) -> None:
        self.network = network
        self.device = torch.device(device or "cpu")
        self.network.to(self.device)
        self.optimizer = torch.optim.Adam(self.network.parameters(), lr=learning_rate)
        self.batch_size = batch_size
        self.shuffle = shuffle
        self.generator = generator
        self._trainer = SequenceClassifierTrainer(
            self.network,
            optimizer=self.optimizer,
            device=self.device,
        )

    def fit(
        self,
        inputs: Sequence[float],
        targets: Sequence[int],
        *,
        epochs: int,
        on_epoch_end: Optional[EpochCallback] = None,
    ) -> List[float]:
        """Train on ``(inputs[i] -> targets[i])`` pairs and return per-epoch losses."""

        loader = make_pair_loader(
            inputs,
            targets,
            batch_size=self.batch_size,
            shuffle=self.shuffle,
            generator=self.generator,
        )
        try:
            return self._trainer.fit(loader, epochs, on_epoch_end=on_epoch_end)
        except TrainingError:
            raise
        except RuntimeError as exc:
            raise TrainingError(f"fit failed: {exc}") from exc

    @torch.no_grad()
    def predict_proba(self, value: float) -> List[float]:
        """Return the softmax distribution over digits following ``value``."""

        self.network.eval()
        inputs = torch.tensor([[[float(value)]]], dtype=torch.float32, device=self.device)
        probs = F.softmax(self.network(inputs), dim=-1)
        return [float(p) for p in probs[0].cpu()]


__all__ = ["DigitClassifier"]
