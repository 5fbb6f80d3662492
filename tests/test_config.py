import dataclasses

import pytest

from digit_rnn.config import ARCHITECTURES, SessionConfig, normalize_architecture
from digit_rnn.errors import ConfigurationError


def test_defaults_follow_interactive_demo() -> None:
    config = SessionConfig()
    assert config.architecture == "LSTM"
    assert config.hidden_units == 10
    assert config.epochs_per_step == 5
    assert config.learning_rate == pytest.approx(1e-3)
    assert config.batch_size == 32


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("lstm", "LSTM"),
        ("GRU", "GRU"),
        ("gru", "GRU"),
        ("SimpleRNN", "SimpleRNN"),
        ("simple_rnn", "SimpleRNN"),
        ("rnn", "SimpleRNN"),
    ],
)
def test_architecture_aliases_are_normalised(alias: str, expected: str) -> None:
    assert normalize_architecture(alias) == expected
    assert SessionConfig(architecture=alias).architecture == expected
    assert expected in ARCHITECTURES


@pytest.mark.parametrize("architecture", ["Transformer", "", None, 3])
def test_unknown_architecture_is_rejected(architecture) -> None:
    with pytest.raises(ConfigurationError):
        SessionConfig(architecture=architecture)


@pytest.mark.parametrize("field", ["hidden_units", "epochs_per_step", "batch_size"])
@pytest.mark.parametrize("value", [0, -3, 1.5, True])
def test_non_positive_or_non_integer_hyperparameters_are_rejected(field: str, value) -> None:
    with pytest.raises(ConfigurationError):
        SessionConfig(**{field: value})


def test_configuration_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        SessionConfig(learning_rate=0.0)


def test_with_changes_validates_and_keeps_other_fields() -> None:
    config = SessionConfig(architecture="GRU", hidden_units=4, seed=7)
    changed = config.with_changes(epochs_per_step=2)
    assert changed.architecture == "GRU"
    assert changed.hidden_units == 4
    assert changed.epochs_per_step == 2
    assert changed.seed == 7
    with pytest.raises(ConfigurationError):
        config.with_changes(hidden_units=0)
    with pytest.raises(ConfigurationError):
        config.with_changes(layers=2)


def test_config_is_immutable() -> None:
    config = SessionConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.hidden_units = 3  # type: ignore[misc]
    assert config.as_dict()["hidden_units"] == 10
