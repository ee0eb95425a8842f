from __future__ import annotations

"""Session orchestrator: runs the module battery trial by trial.

The orchestrator owns the only scheduler, so every delayed phase change
(exposure, feedback, transition) is a cancellable transition. Front-ends
feed it answer submissions and quit requests and call poll() (or wait())
to let due transitions fire.
"""

import random
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from ..audio.speech import NullSpeaker, Speaker
from ..bank.models import ModuleConfig, Question, QuestionKind
from ..errors import ConfigurationError, InputError
from ..results.schema import AssessmentResult
from ..runners.base_runner import BaseRunner, Resolution
from ..runners.span import AdaptiveSpanController
from ..stats.metrics import MetricsAccumulator
from ..util.randomness import make_rng
from . import events as ev
from .events import EventBus
from .explain import trace as xtrace
from .module_registry import make_runner, raw_metric
from .timers import Clock, MonotonicClock, Scheduler


class SessionPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    QUIT = "quit"


@dataclass
class Session:
    session_id: str = field(default_factory=lambda: str(uuid4()))
    results: List[AssessmentResult] = field(default_factory=list)
    index: int = 0
    phase: SessionPhase = SessionPhase.IDLE
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class SessionOrchestrator:
    def __init__(
        self,
        modules: Sequence[ModuleConfig],
        cfg: Optional[Dict[str, Any]] = None,
        *,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        bus: Optional[EventBus] = None,
        speaker: Optional[Speaker] = None,
    ) -> None:
        self.modules = list(modules)
        self.cfg = cfg or {}
        self.clock = clock or MonotonicClock()
        self.rng = rng or make_rng()
        self.bus = bus or EventBus()
        self.speaker = speaker or NullSpeaker()
        self.scheduler = Scheduler(self.clock)
        self.session = Session()
        self.runner: Optional[BaseRunner] = None
        self._accumulator: Optional[MetricsAccumulator] = None

    # --- read-only views ---

    @property
    def phase(self) -> SessionPhase:
        return self.session.phase

    @property
    def results(self) -> List[AssessmentResult]:
        return list(self.session.results)

    @property
    def current_module(self) -> Optional[ModuleConfig]:
        if self.session.phase is not SessionPhase.RUNNING or self.runner is None:
            return None
        return self.runner.config

    @property
    def current_question(self) -> Optional[Question]:
        runner = self.runner
        if runner is None or runner.config.is_span:
            return None
        return runner.config.questions[runner.trial_index]

    # --- lifecycle ---

    def start(self) -> None:
        if self.session.phase is not SessionPhase.IDLE:
            raise RuntimeError(f"session already {self.session.phase.value}")
        self.session.phase = SessionPhase.RUNNING
        self.session.started_at = datetime.now(timezone.utc)
        self.bus.emit(ev.SESSION_STARTED, {"session_id": self.session.session_id, "modules": len(self.modules)})
        self._start_module()

    def restart(self) -> None:
        """Drop everything, including completed results, and return to IDLE."""
        self.scheduler.cancel()
        self.runner = None
        self._accumulator = None
        self.session = Session()

    def quit(self) -> List[AssessmentResult]:
        """Abandon the live module; completed results are kept."""
        if self.session.phase is not SessionPhase.RUNNING:
            return self.results
        self.scheduler.cancel()
        module = self.runner.config.type.value if self.runner else None
        self.runner = None
        self._accumulator = None
        self.session.phase = SessionPhase.QUIT
        self.session.ended_at = datetime.now(timezone.utc)
        self.bus.emit(ev.SESSION_QUIT, {"abandoned": module, "completed": len(self.session.results)})
        return self.results

    # --- inputs ---

    def submit(self, value: Any) -> Optional[Resolution]:
        """Submit an answer, a single sequence pick, or a span digit sequence.

        Raises InputError (and changes nothing) when the live trial cannot
        take this input.
        """
        runner = self._live_runner()
        res = runner.submit(value, self.clock.now_ms())
        if res is None:
            self.bus.emit(ev.PICK_ACCEPTED, {"value": value, "picks": list(getattr(runner, "picks", ()))})
            return None
        self.bus.emit(
            ev.TRIAL_RESOLVED,
            {
                "module": runner.config.type.value,
                "trial": res.trial_index,
                "correct": res.correct,
                "reaction_time_ms": round(res.reaction_time_ms),
                "last": res.is_last_trial,
            },
        )
        self.scheduler.schedule(runner.feedback_ms, "feedback", self._after_feedback)
        return res

    def clear_input(self) -> None:
        self._live_runner().clear_input()

    def replay_audio(self) -> None:
        q = self.current_question
        if q is not None and q.kind is QuestionKind.AUDIO_MATCH:
            self.speaker.speak(q.spoken_text)

    # --- time ---

    def poll(self) -> bool:
        """Fire the pending transition if due."""
        return self.scheduler.fire_due()

    def wait(self) -> bool:
        """Block until the pending transition is due and fire it."""
        return self.scheduler.wait()

    # --- internals ---

    def _live_runner(self) -> BaseRunner:
        if self.session.phase is not SessionPhase.RUNNING or self.runner is None:
            raise InputError("no module is running")
        return self.runner

    def _start_module(self) -> None:
        while self.session.index < len(self.modules):
            config = self.modules[self.session.index]
            try:
                config.validate()
            except ConfigurationError as exc:
                print(f"[WARN] Skipping {config.type.value}: {exc}")
                self.bus.emit(ev.MODULE_FAILED, {"module": config.type.value, "error": str(exc)})
                self.session.index += 1
                continue
            self._accumulator = MetricsAccumulator()
            self.runner = make_runner(config, self._accumulator, rng=self.rng, cfg=self.cfg)
            self.bus.emit(
                ev.MODULE_STARTED,
                {
                    "module": config.type.value,
                    "title": config.title,
                    "instructions": config.instructions,
                    "position": self.session.index + 1,
                    "of": len(self.modules),
                },
            )
            self._begin_trial()
            return
        self._complete_session()

    def _begin_trial(self) -> None:
        runner = self.runner
        assert runner is not None
        trial = runner.begin_trial(self.clock.now_ms())
        payload: Dict[str, Any] = {"module": runner.config.type.value, "trial": trial.index}
        if isinstance(runner, AdaptiveSpanController):
            payload["span"] = runner.span
            payload["sequence"] = list(runner.sequence)
            self.bus.emit(ev.TRIAL_STARTED, payload)
            self.scheduler.schedule(runner.exposure_ms, "exposure", self._end_exposure)
            return
        q = runner.config.questions[trial.index]
        payload.update({"question": q.id, "of": len(runner.config.questions)})
        self.bus.emit(ev.TRIAL_STARTED, payload)
        if q.kind is QuestionKind.AUDIO_MATCH:
            self.speaker.speak(q.spoken_text)

    def _end_exposure(self) -> None:
        runner = self.runner
        assert isinstance(runner, AdaptiveSpanController)
        runner.end_exposure(self.clock.now_ms())
        self.bus.emit(ev.EXPOSURE_ENDED, {"trial": runner.trial_index, "span": runner.span})

    def _after_feedback(self) -> None:
        runner = self.runner
        assert runner is not None
        if runner.finish_feedback():
            self._complete_module()
        elif runner.transition_ms > 0:
            self.scheduler.schedule(runner.transition_ms, "transition", self._begin_trial)
        else:
            self._begin_trial()

    def _complete_module(self) -> None:
        runner, acc = self.runner, self._accumulator
        assert runner is not None and acc is not None
        config = runner.config
        metrics = acc.snapshot()
        result = AssessmentResult(
            type=config.type,
            score=int(config.calculate_score(metrics)),
            raw_metric=raw_metric(config.type, metrics),
            total_items=metrics.total_trials,
            completed=True,
            date=datetime.now(timezone.utc).isoformat(),
        )
        self.session.results.append(result)
        xtrace("metrics", {"module": config.type.value, **asdict(metrics)})
        self.bus.emit(ev.MODULE_COMPLETE, result)
        self.runner = None
        self._accumulator = None
        self.session.index += 1
        self._start_module()

    def _complete_session(self) -> None:
        self.session.phase = SessionPhase.COMPLETE
        self.session.ended_at = datetime.now(timezone.utc)
        self.bus.emit(ev.SESSION_COMPLETE, self.results)
