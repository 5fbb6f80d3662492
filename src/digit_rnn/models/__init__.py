"""Recurrent classifiers and their factory."""

from .classifier import DigitClassifier
from .factory import build_classifier, build_recurrent_network
from .recurrent import RecurrentDigitNetwork

__all__ = [
    "DigitClassifier",
    "RecurrentDigitNetwork",
    "build_classifier",
    "build_recurrent_network",
]
