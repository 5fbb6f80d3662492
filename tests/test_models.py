import pytest

torch = pytest.importorskip("torch")

from digit_rnn.config import ARCHITECTURES, SessionConfig
from digit_rnn.errors import ConfigurationError
from digit_rnn.models import DigitClassifier, RecurrentDigitNetwork, build_classifier, build_recurrent_network


@pytest.mark.parametrize("architecture", ARCHITECTURES)
@pytest.mark.parametrize("hidden_units", [1, 10])
def test_untrained_classifier_returns_distribution(architecture: str, hidden_units: int) -> None:
    classifier = build_classifier(
        SessionConfig(architecture=architecture, hidden_units=hidden_units)
    )
    for value in (0, 4.5, 9):
        probabilities = classifier.predict_proba(value)
        assert len(probabilities) == 10
        assert sum(probabilities) == pytest.approx(1.0, abs=1e-5)
        assert all(p >= 0 for p in probabilities)


@pytest.mark.parametrize(
    "architecture, cell",
    [("SimpleRNN", torch.nn.RNN), ("LSTM", torch.nn.LSTM), ("GRU", torch.nn.GRU)],
)
def test_network_uses_requested_cell(architecture: str, cell) -> None:
    network = build_recurrent_network(architecture, 7)
    assert type(network.encoder) is cell
    assert network.encoder.hidden_size == 7
    assert network.encoder.input_size == 1
    assert network.output_layer.out_features == 10
    logits = network(torch.zeros(3, 1, 1))
    assert logits.shape == (3, 10)


def test_network_rejects_bad_arguments() -> None:
    with pytest.raises(ConfigurationError):
        RecurrentDigitNetwork("Transformer", 4)
    with pytest.raises(ConfigurationError):
        RecurrentDigitNetwork("GRU", 0)
    network = RecurrentDigitNetwork("GRU", 2)
    with pytest.raises(ValueError):
        network(torch.zeros(3, 1))


def test_factory_rejects_non_config() -> None:
    with pytest.raises(ConfigurationError):
        build_classifier({"architecture": "LSTM"})  # type: ignore[arg-type]


def test_seeded_builds_are_reproducible_and_leave_global_rng_alone() -> None:
    torch.manual_seed(123)
    expected = torch.rand(1)
    torch.manual_seed(123)
    config = SessionConfig(architecture="GRU", hidden_units=5, seed=3)
    first = build_classifier(config)
    second = build_classifier(config)
    assert torch.rand(1).item() == pytest.approx(expected.item())
    assert first.predict_proba(2) == pytest.approx(second.predict_proba(2))


def test_identical_builds_share_no_state() -> None:
    config = SessionConfig(architecture="LSTM", hidden_units=4, seed=11)
    trained = build_classifier(config)
    untouched = build_classifier(config)
    assert isinstance(trained, DigitClassifier)
    assert trained is not untouched
    assert trained.optimizer is not untouched.optimizer
    untouched_ids = {id(p) for p in untouched.network.parameters()}
    assert all(id(p) not in untouched_ids for p in trained.network.parameters())

    before = untouched.predict_proba(3)
    trained.fit([3.0, 7.0], [7, 1], epochs=20)
    assert untouched.predict_proba(3) == pytest.approx(before)
    assert trained.predict_proba(3) != pytest.approx(before)


def test_fit_learns_a_repeated_transition() -> None:
    classifier = build_classifier(
        SessionConfig(architecture="LSTM", hidden_units=10, learning_rate=0.05, seed=0)
    )
    losses = classifier.fit([3.0, 3.0, 3.0], [7, 7, 7], epochs=100)
    assert len(losses) == 100
    assert losses[-1] < losses[0]
    probabilities = classifier.predict_proba(3)
    assert max(range(10), key=probabilities.__getitem__) == 7
