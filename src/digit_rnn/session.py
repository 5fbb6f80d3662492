"""Incremental retraining session over a growing digit history."""

from __future__ import annotations

import logging
import numbers
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .config import NUM_CLASSES, SessionConfig
from .errors import ConfigurationError, InputError, TrainingError
from .models import DigitClassifier, build_classifier
from .results import EpochLoss, PredictionResult
from .training import build_training_pairs

logger = logging.getLogger(__name__)

ProgressListener = Callable[[EpochLoss], None]
ClassifierFactory = Callable[[SessionConfig], DigitClassifier]


@dataclass
class _Pass:
    generation: int
    model: DigitClassifier
    history: Tuple[int, ...]
    epochs: int
    trace: List[EpochLoss]
    previous_trace: List[EpochLoss]


def _validate_digit(digit: Any) -> int:
    if isinstance(digit, bool) or not isinstance(digit, numbers.Integral):
        raise InputError(f"digit must be an integer, got {digit!r}")
    if not 0 <= digit < NUM_CLASSES:
        raise InputError(f"digit must lie in [0, {NUM_CLASSES - 1}], got {digit}")
    return int(digit)


class IncrementalTrainer:
    """Retrain a recurrent classifier on the whole history after every digit.

    The session owns one classifier, the observation sequence, the trace of
    the latest retraining pass and the latest prediction. ``observe`` appends a
    digit and, once at least two digits are known, trains the current
    classifier for ``epochs_per_step`` epochs over every adjacent pair of the
    history before predicting the digit that follows the newest one.

    Only one pass runs at a time: while :attr:`is_training` is true further
    observations raise :class:`InputError`. Reconfiguring during a pass
    supersedes it, and its results are discarded when it completes.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        *,
        factory: ClassifierFactory = build_classifier,
    ) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._listeners: List[ProgressListener] = []
        self._executor: Optional[ThreadPoolExecutor] = None
        self._generation = 0
        self._config = config if config is not None else SessionConfig()
        if not isinstance(self._config, SessionConfig):
            raise ConfigurationError(f"expected SessionConfig, got {type(config).__name__}")
        self._model = factory(self._config)
        self._sequence: List[int] = []
        self._trace: List[EpochLoss] = []
        self._prediction: Optional[PredictionResult] = None
        self._is_training = False

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def model(self) -> DigitClassifier:
        return self._model

    @property
    def sequence(self) -> Tuple[int, ...]:
        with self._lock:
            return tuple(self._sequence)

    @property
    def trace(self) -> Tuple[EpochLoss, ...]:
        """Snapshot of the current trace, partial while a pass is running."""

        with self._lock:
            return tuple(self._trace)

    @property
    def prediction(self) -> Optional[PredictionResult]:
        with self._lock:
            return self._prediction

    @property
    def is_training(self) -> bool:
        with self._lock:
            return self._is_training

    def add_listener(self, listener: ProgressListener) -> None:
        """Call ``listener(EpochLoss)`` after every epoch of every pass."""

        self._listeners.append(listener)

    def remove_listener(self, listener: ProgressListener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def reconfigure(self, config: SessionConfig) -> None:
        """Replace the classifier and clear sequence, trace and prediction."""

        if not isinstance(config, SessionConfig):
            raise ConfigurationError(f"expected SessionConfig, got {type(config).__name__}")
        model = self._factory(config)
        with self._lock:
            if self._is_training:
                logger.warning(
                    "Reconfiguring during a retraining pass; its result will be discarded"
                )
            self._generation += 1
            self._config = config
            self._model = model
            self._sequence = []
            self._trace = []
            self._prediction = None
            self._is_training = False
        logger.info(
            "Session reconfigured: %s, %d units, %d epochs per step",
            config.architecture,
            config.hidden_units,
            config.epochs_per_step,
        )

    def update(self, **changes: Any) -> None:
        """Reconfigure with some fields of the current configuration changed."""

        self.reconfigure(self._config.with_changes(**changes))

    def reset(self) -> None:
        """Start over with a fresh classifier under the current configuration."""

        self.reconfigure(self._config)

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------
    def observe(self, digit: int) -> Optional[PredictionResult]:
        """Append ``digit``, retrain and return the new prediction.

        Returns ``None`` while fewer than two digits have been observed, or
        when the pass was superseded by :meth:`reconfigure`.
        """

        job = self._begin(digit)
        if job is None:
            return None
        return self._run(job)

    def observe_async(self, digit: int) -> "Future[Optional[PredictionResult]]":
        """Like :meth:`observe` but retrain on the session's worker thread.

        Validation and the append happen before this method returns, so an
        :class:`InputError` is raised synchronously.
        """

        job = self._begin(digit)
        if job is None:
            future: Future[Optional[PredictionResult]] = Future()
            future.set_result(None)
            return future
        return self._ensure_executor().submit(self._run, job)

    def close(self) -> None:
        """Wait for any background pass and release the worker thread."""

        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "IncrementalTrainer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="digit-rnn-train"
            )
        return self._executor

    def _begin(self, digit: Any) -> Optional[_Pass]:
        value = _validate_digit(digit)
        with self._lock:
            if self._is_training:
                raise InputError("a retraining pass is already running")
            self._sequence.append(value)
            previous_trace = self._trace
            self._trace = []
            if len(self._sequence) < 2:
                return None
            self._is_training = True
            return _Pass(
                generation=self._generation,
                model=self._model,
                history=tuple(self._sequence),
                epochs=self._config.epochs_per_step,
                trace=self._trace,
                previous_trace=previous_trace,
            )

    def _run(self, job: _Pass) -> Optional[PredictionResult]:
        inputs, targets = build_training_pairs(job.history)

        def on_epoch_end(epoch_index: int, loss: float) -> None:
            self._record_epoch(job, EpochLoss(epoch_index + 1, float(loss)))

        try:
            job.model.fit(inputs, targets, epochs=job.epochs, on_epoch_end=on_epoch_end)
            result = PredictionResult.from_probabilities(job.model.predict_proba(job.history[-1]))
        except TrainingError:
            if not self._abandon(job):
                logger.warning("Superseded retraining pass failed; ignoring the failure")
                return None
            logger.warning(
                "Retraining over %d pairs failed; keeping the previous trace and prediction",
                len(targets),
            )
            raise
        except BaseException:
            self._abandon(job)
            raise
        return self._commit(job, result, len(targets))

    def _is_current(self, job: _Pass) -> bool:
        return job.generation == self._generation

    def _record_epoch(self, job: _Pass, point: EpochLoss) -> None:
        with self._lock:
            if not self._is_current(job):
                return
            job.trace.append(point)
        logger.debug("Epoch %d/%d: loss=%.4f", point.epoch, job.epochs, point.loss)
        for listener in list(self._listeners):
            listener(point)

    def _abandon(self, job: _Pass) -> bool:
        with self._lock:
            if not self._is_current(job):
                return False
            self._trace = job.previous_trace
            self._is_training = False
            return True

    def _commit(
        self, job: _Pass, result: PredictionResult, num_pairs: int
    ) -> Optional[PredictionResult]:
        with self._lock:
            if not self._is_current(job):
                logger.warning(
                    "Discarding result of a retraining pass for a replaced classifier"
                )
                return None
            self._prediction = result
            self._is_training = False
        logger.info(
            "Retrained on %d pairs for %d epochs; predicted %d",
            num_pairs,
            job.epochs,
            result.predicted_class,
        )
        return result


__all__ = ["ClassifierFactory", "IncrementalTrainer", "ProgressListener"]
