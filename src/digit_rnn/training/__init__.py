"""Training utilities for recurrent digit classifiers."""

from .data import build_training_pairs, make_pair_loader
from .trainer import EpochCallback, SequenceClassifierTrainer

__all__ = [
    "EpochCallback",
    "SequenceClassifierTrainer",
    "build_training_pairs",
    "make_pair_loader",
]
