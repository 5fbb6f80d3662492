"""Configuration dataclasses for the incremental digit predictor."""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from .errors import ConfigurationError

ARCHITECTURES = ("SimpleRNN", "LSTM", "GRU")
NUM_CLASSES = 10

_ALIASES = {
    "simplernn": "SimpleRNN",
    "simple_rnn": "SimpleRNN",
    "simple-rnn": "SimpleRNN",
    "rnn": "SimpleRNN",
    "lstm": "LSTM",
    "gru": "GRU",
}


def normalize_architecture(architecture: str) -> str:
    """Return the canonical tag for ``architecture`` or raise ``ConfigurationError``."""

    if not isinstance(architecture, str):
        raise ConfigurationError(f"architecture must be a string, got {architecture!r}")
    canonical = _ALIASES.get(architecture.strip().lower())
    if canonical is None:
        choices = ", ".join(ARCHITECTURES)
        raise ConfigurationError(f"unknown architecture {architecture!r}; expected one of {choices}")
    return canonical


def require_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive")


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Hyperparameters of one prediction session.

    Parameters
    ----------
    architecture:
        Recurrent cell type: ``"SimpleRNN"``, ``"LSTM"`` or ``"GRU"``. Common
        lower-case spellings are accepted and normalised.
    hidden_units:
        Size of the recurrent layer's hidden state.
    epochs_per_step:
        Number of optimisation passes over the whole history after every
        observation.
    learning_rate:
        Adam step size.
    batch_size:
        Mini-batch size used while fitting. Histories shorter than this are
        trained as a single batch.
    shuffle:
        Shuffle training pairs at the start of each epoch.
    seed:
        Optional seed making weight initialisation and shuffling reproducible.
    device:
        Torch device string. ``None`` selects ``"cpu"``.
    """

    architecture: str = "LSTM"
    hidden_units: int = 10
    epochs_per_step: int = 5
    learning_rate: float = 1e-3
    batch_size: int = 32
    shuffle: bool = True
    seed: Optional[int] = None
    device: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "architecture", normalize_architecture(self.architecture))
        require_positive_int("hidden_units", self.hidden_units)
        require_positive_int("epochs_per_step", self.epochs_per_step)
        require_positive_int("batch_size", self.batch_size)
        if isinstance(self.learning_rate, bool) or not isinstance(self.learning_rate, (int, float)):
            raise ConfigurationError(f"learning_rate must be a number, got {self.learning_rate!r}")
        if not self.learning_rate > 0:
            raise ConfigurationError("learning_rate must be positive")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigurationError(f"seed must be an integer or None, got {self.seed!r}")

    def with_changes(self, **changes: Any) -> "SessionConfig":
        """Return a validated copy with ``changes`` applied."""

        try:
            return replace(self, **changes)
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "ARCHITECTURES",
    "NUM_CLASSES",
    "SessionConfig",
    "normalize_architecture",
    "require_positive_int",
]
