"""Single-layer recurrent classifier over scalar timesteps."""

from __future__ import annotations

from typing import Dict, Type

from torch import Tensor, nn

from ..config import NUM_CLASSES, normalize_architecture, require_positive_int

_CELLS: Dict[str, Type[nn.RNNBase]] = {
    "SimpleRNN": nn.RNN,
    "LSTM": nn.LSTM,
    "GRU": nn.GRU,
}


class RecurrentDigitNetwork(nn.Module):
    """One recurrent layer followed by a linear head over ``num_classes`` digits.

    Inputs have shape ``(batch, length, input_size)``; the head reads the
    hidden state after the final timestep and returns unnormalised logits.
    """

    def __init__(
        self,
        architecture: str,
        hidden_units: int,
        *,
        input_size: int = 1,
        num_classes: int = NUM_CLASSES,
    ) -> None:
        super().__init__()
        architecture = normalize_architecture(architecture)
        require_positive_int("hidden_units", hidden_units)
        require_positive_int("input_size", input_size)
        require_positive_int("num_classes", num_classes)

        self.architecture = architecture
        self.hidden_units = hidden_units
        self.input_size = input_size
        self.num_classes = num_classes
        self.encoder = _CELLS[architecture](
            input_size=input_size,
            hidden_size=hidden_units,
            num_layers=1,
            batch_first=True,
        )
        self.output_layer = nn.Linear(hidden_units, num_classes)

    def forward(self, inputs: Tensor) -> Tensor:
        if inputs.ndim != 3:
            raise ValueError("inputs must have shape (batch, length, input_size)")
        output, _ = self.encoder(inputs)
        return self.output_layer(output[:, -1, :])


__all__ = ["RecurrentDigitNetwork"]
