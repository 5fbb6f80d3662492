"""Value objects produced by a retraining pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple

from .config import NUM_CLASSES


class EpochLoss(NamedTuple):
    """One point of a training trace; ``epoch`` counts from 1."""

    epoch: int
    loss: float


def first_argmax(values: Sequence[float]) -> int:
    """Index of the largest value, preferring the lowest index on ties."""

    if not values:
        raise ValueError("values must not be empty")
    best = 0
    for index in range(1, len(values)):
        if values[index] > values[best]:
            best = index
    return best


@dataclass(frozen=True, slots=True)
class PredictionResult:
    """Predicted next digit and the full distribution it was taken from."""

    predicted_class: int
    class_probabilities: Tuple[float, ...]

    @classmethod
    def from_probabilities(cls, probabilities: Sequence[float]) -> "PredictionResult":
        if len(probabilities) != NUM_CLASSES:
            raise ValueError(
                f"expected {NUM_CLASSES} class probabilities, got {len(probabilities)}"
            )
        values = tuple(float(p) for p in probabilities)
        return cls(predicted_class=first_argmax(values), class_probabilities=values)


__all__ = ["EpochLoss", "PredictionResult", "first_argmax"]
