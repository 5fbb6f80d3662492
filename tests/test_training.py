import pytest

torch = pytest.importorskip("torch")

from digit_rnn.errors import TrainingError
from digit_rnn.models import RecurrentDigitNetwork
from digit_rnn.training import SequenceClassifierTrainer, build_training_pairs, make_pair_loader


def test_pairs_cover_every_adjacent_observation() -> None:
    inputs, targets = build_training_pairs([4, 1, 1, 9])
    assert inputs == [4.0, 1.0, 1.0]
    assert targets == [1, 1, 9]


def test_pairs_need_two_observations() -> None:
    with pytest.raises(ValueError):
        build_training_pairs([5])


def test_loader_shapes_scalars_as_length_one_sequences() -> None:
    loader = make_pair_loader([1.0, 2.0, 3.0], [2, 3, 4], batch_size=2, shuffle=False)
    batches = list(loader)
    assert len(batches) == 2
    inputs, targets = batches[0]
    assert inputs.shape == (2, 1, 1)
    assert inputs.dtype == torch.float32
    assert targets.tolist() == [2, 3]


def test_loader_rejects_mismatched_lengths() -> None:
    with pytest.raises(ValueError):
        make_pair_loader([1.0], [1, 2], batch_size=4)


def test_fit_reports_every_epoch() -> None:
    torch.manual_seed(0)
    model = RecurrentDigitNetwork("GRU", 6)
    optimizer = torch.optim.Adam(model.parameters(), lr=1e-2)
    trainer = SequenceClassifierTrainer(model, optimizer=optimizer, device="cpu")
    loader = make_pair_loader([1.0, 2.0, 3.0], [2, 3, 4], batch_size=2, shuffle=False)
    seen = []
    losses = trainer.fit(loader, 4, on_epoch_end=lambda epoch, loss: seen.append((epoch, loss)))
    assert [epoch for epoch, _ in seen] == [0, 1, 2, 3]
    assert [loss for _, loss in seen] == losses
    assert all(loss > 0 for loss in losses)
    assert trainer.step == 8


def test_non_finite_loss_raises_training_error() -> None:
    model = RecurrentDigitNetwork("SimpleRNN", 3)
    with torch.no_grad():
        model.output_layer.bias.fill_(float("nan"))
    optimizer = torch.optim.Adam(model.parameters(), lr=1e-3)
    trainer = SequenceClassifierTrainer(model, optimizer=optimizer, device="cpu")
    loader = make_pair_loader([1.0], [2], batch_size=1)
    with pytest.raises(TrainingError):
        trainer.fit(loader, 2)
    assert trainer.step == 0


def test_fit_requires_positive_epochs() -> None:
    model = RecurrentDigitNetwork("LSTM", 2)
    optimizer = torch.optim.Adam(model.parameters())
    trainer = SequenceClassifierTrainer(model, optimizer=optimizer, device="cpu")
    with pytest.raises(ValueError):
        trainer.fit(make_pair_loader([1.0], [2], batch_size=1), 0)
