"""Exception hierarchy for the incremental digit predictor."""

from __future__ import annotations


class DigitRNNError(Exception):
    """Base class for every error raised by :mod:`digit_rnn`."""


class ConfigurationError(DigitRNNError, ValueError):
    """Invalid architecture tag or non-positive hyperparameter."""


class InputError(DigitRNNError, ValueError):
    """Observation rejected because it is out of range or training is running."""


class TrainingError(DigitRNNError, RuntimeError):
    """Numerical or runtime failure while fitting the classifier."""


__all__ = ["ConfigurationError", "DigitRNNError", "InputError", "TrainingError"]
