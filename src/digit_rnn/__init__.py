"""Next-digit prediction with a recurrent classifier retrained on every click.

A session keeps the history of observed digits, retrains a small SimpleRNN,
LSTM or GRU classifier over every adjacent pair of that history after each
new digit, and predicts the digit most likely to come next.
"""

from .config import ARCHITECTURES, NUM_CLASSES, SessionConfig
from .errors import ConfigurationError, DigitRNNError, InputError, TrainingError
from .models import DigitClassifier, build_classifier
from .results import EpochLoss, PredictionResult, first_argmax
from .session import IncrementalTrainer

__all__ = [
    "ARCHITECTURES",
    "NUM_CLASSES",
    "ConfigurationError",
    "DigitClassifier",
    "DigitRNNError",
    "EpochLoss",
    "IncrementalTrainer",
    "InputError",
    "PredictionResult",
    "SessionConfig",
    "TrainingError",
    "build_classifier",
    "first_argmax",
]
