"""Construction of fresh classifiers from a :class:`SessionConfig`."""

from __future__ import annotations

import logging

import torch

from ..config import NUM_CLASSES, SessionConfig
from ..errors import ConfigurationError
from .classifier import DigitClassifier
from .recurrent import RecurrentDigitNetwork

logger = logging.getLogger(__name__)


def build_recurrent_network(
    architecture: str,
    hidden_units: int,
    *,
    input_size: int = 1,
    num_classes: int = NUM_CLASSES,
) -> RecurrentDigitNetwork:
    return RecurrentDigitNetwork(
        architecture,
        hidden_units,
        input_size=input_size,
        num_classes=num_classes,
    )


def build_classifier(config: SessionConfig) -> DigitClassifier:
    """Return a newly initialised classifier for ``config``.

    With ``config.seed`` set, initialisation and shuffling are reproducible and
    the global torch RNG is left untouched.
    """

    if not isinstance(config, SessionConfig):
        raise ConfigurationError(f"expected SessionConfig, got {type(config).__name__}")

    generator = None
    if config.seed is None:
        network = build_recurrent_network(config.architecture, config.hidden_units)
    else:
        with torch.random.fork_rng(devices=[]):
            torch.manual_seed(config.seed)
            network = build_recurrent_network(config.architecture, config.hidden_units)
        generator = torch.Generator().manual_seed(config.seed)

    classifier = DigitClassifier(
        network,
        learning_rate=config.learning_rate,
        batch_size=config.batch_size,
        shuffle=config.shuffle,
        device=config.device,
        generator=generator,
    )
    logger.info(
        "Built %s classifier with %d hidden units",
        config.architecture,
        config.hidden_units,
    )
    return classifier


__all__ = ["build_classifier", "build_recurrent_network"]
