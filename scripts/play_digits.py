"""Feed digits to an incremental recurrent predictor from the terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional

from tqdm.auto import tqdm

from digit_rnn import ARCHITECTURES, DigitRNNError, EpochLoss, IncrementalTrainer, SessionConfig

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Enter a digit 0-9 to observe it, 'arch <name>', 'units <n>' or 'epochs <n>' "
    "to reconfigure, 'reset' to start over, 'q' to quit."
)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Predict the next clicked digit")
    parser.add_argument("digits", nargs="*", type=int, help="digits to replay, else read stdin")
    parser.add_argument(
        "--architecture", type=str, default="LSTM", help=f"one of {', '.join(ARCHITECTURES)}"
    )
    parser.add_argument("--units", type=int, default=10)
    parser.add_argument("--epochs", type=int, default=5)
    parser.add_argument("--lr", type=float, default=1e-3)
    parser.add_argument("--batch-size", type=int, default=32)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--device", type=str, default=None)
    parser.add_argument("--plot-path", type=str, default=None)
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser.parse_args(argv)


class EpochProgress:
    """Show the epochs of one retraining pass as a tqdm bar."""

    def __init__(self, total: int) -> None:
        self._bar = tqdm(total=total, desc="Training", leave=False)

    def __call__(self, point: EpochLoss) -> None:
        self._bar.update(1)
        self._bar.set_postfix(loss=f"{point.loss:.4f}")

    def close(self) -> None:
        self._bar.close()


def observe(session: IncrementalTrainer, digit: int) -> None:
    progress = EpochProgress(session.config.epochs_per_step)
    session.add_listener(progress)
    try:
        session.observe(digit)
    finally:
        session.remove_listener(progress)
        progress.close()
    print(f"Sequence: {', '.join(str(d) for d in session.sequence)}")
    for point in session.trace:
        print(f"  epoch {point.epoch}: loss={point.loss:.4f}")
    prediction = session.prediction
    print(f"Prediction: {prediction.predicted_class if prediction is not None else 'N/A'}")


def handle_command(session: IncrementalTrainer, line: str) -> bool:
    """Apply one line of input; return ``False`` when the user quits."""

    parts = line.split()
    if not parts:
        return True
    command = parts[0].lower()
    if command in {"q", "quit", "exit"}:
        return False
    if command == "reset":
        session.reset()
        print("Session reset.")
    elif command in {"arch", "units", "epochs"} and len(parts) == 2:
        field, value = {
            "arch": ("architecture", parts[1]),
            "units": ("hidden_units", _parse_int(parts[1])),
            "epochs": ("epochs_per_step", _parse_int(parts[1])),
        }[command]
        session.update(**{field: value})
        config = session.config
        print(
            f"Reconfigured: {config.architecture}, {config.hidden_units} units, "
            f"{config.epochs_per_step} epochs"
        )
    elif command.isdigit():
        observe(session, int(command))
    else:
        print(HELP_TEXT)
    return True


def _parse_int(text: str):
    try:
        return int(text)
    except ValueError:
        return text


def run(session: IncrementalTrainer, lines: Iterable[str]) -> None:
    for line in lines:
        try:
            if not handle_command(session, line.strip()):
                break
        except DigitRNNError as exc:
            print(f"Error: {exc}")


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = SessionConfig(
            architecture=args.architecture,
            hidden_units=args.units,
            epochs_per_step=args.epochs,
            learning_rate=args.lr,
            batch_size=args.batch_size,
            seed=args.seed,
            device=args.device,
        )
    except DigitRNNError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    logger.info("Session configuration: %s", config.as_dict())

    with IncrementalTrainer(config) as session:
        if args.digits:
            run(session, (str(digit) for digit in args.digits))
        else:
            print(HELP_TEXT)
            run(session, sys.stdin)

        if args.plot_path and session.trace:
            from digit_rnn.utils import plot_training_trace

            plot_training_trace(session.trace, args.plot_path)
            print(f"Saved loss plot to {args.plot_path}")


if __name__ == "__main__":
    main()
