from __future__ import annotations

"""Terminal front-end for cogscreen using SessionOrchestrator and the module registry."""

import argparse
from typing import Any, List, Optional

from .. import __version__
from ..bank.models import AssessmentType, QuestionKind
from ..bank.questions import build_battery, build_module
from ..audio.speech import make_speaker_from_config
from ..config.config import load_config, validate_config
from ..errors import InputError
from ..results.schema import AssessmentResult
from ..runners.sequencer import TrialSequencer
from ..summary.narrative import NarrativeSummarizer
from ..util.randomness import make_rng
from . import events as ev
from .events import EventBus
from .module_registry import get_module, list_modules
from .session_manager import SessionOrchestrator, SessionPhase

CLEAR_SCREEN = "\033[2J\033[H"


class TerminalView:
    """Prints orchestrator notifications and builds input prompts."""

    def __init__(self, orch: SessionOrchestrator) -> None:
        self.orch = orch
        bus = orch.bus
        bus.subscribe(ev.MODULE_STARTED, self._on_module_started)
        bus.subscribe(ev.TRIAL_STARTED, self._on_trial_started)
        bus.subscribe(ev.EXPOSURE_ENDED, self._on_exposure_ended)
        bus.subscribe(ev.TRIAL_RESOLVED, self._on_trial_resolved)
        bus.subscribe(ev.MODULE_COMPLETE, self._on_module_complete)
        bus.subscribe(ev.MODULE_FAILED, self._on_module_failed)

    def _on_module_started(self, p: dict) -> None:
        print(f"\n=== Module {p['position']} of {p['of']}: {p['title']} ===")
        print(p["instructions"])

    def _on_trial_started(self, p: dict) -> None:
        if "sequence" in p:
            print(f"\nLevel {p['span'] - 1}. Memorize:")
            print("   " + "  ".join(p["sequence"]))
            return
        q = self.orch.current_question
        if q is None:
            return
        print(f"\nQ{p['trial'] + 1}/{p['of']}")
        if q.kind is QuestionKind.SEQUENCE:
            print("Spell the word:")
        else:
            print(q.stimulus)
        if q.prompt:
            print(q.prompt)

    def _on_exposure_ended(self, p: dict) -> None:
        print(CLEAR_SCREEN, end="")
        print(f"Enter the {p['span']} digits in order.")

    def _on_trial_resolved(self, p: dict) -> None:
        print("Correct!" if p["correct"] else "Incorrect.")

    def _on_module_complete(self, result: AssessmentResult) -> None:
        print(f"--- {result.type.value}: score {result.score}/100")

    def _on_module_failed(self, p: dict) -> None:
        print(f"--- {p['module']} could not run: {p['error']}")

    def prompt(self) -> str:
        runner = self.orch.runner
        if runner is None:
            return "> "
        if not isinstance(runner, TrialSequencer):
            return "Digits (':c' clear, ':q' quit): "
        q = runner.question
        if q.kind is QuestionKind.SEQUENCE:
            opts = " ".join(opt if ok else "·" for opt, ok in runner.option_states())
            slots = " ".join(runner.picks[i] if i < len(runner.picks) else "_" for i in range(q.target_length))
            return f"[{slots}]  letters: {opts}  (one letter, ':c' reset, ':q' quit): "
        opts = "  ".join(f"{i}) {opt}" for i, opt in enumerate(q.options or (), start=1))
        extra = ", ':a' replay sound" if q.kind is QuestionKind.AUDIO_MATCH else ""
        return f"{opts}\nChoice (number or text{extra}, ':q' quit): "

    def parse(self, raw: str) -> Any:
        """Translate typed text into a submission for the live trial."""
        runner = self.orch.runner
        text = raw.strip()
        if isinstance(runner, TrialSequencer) and runner.question.kind is not QuestionKind.SEQUENCE:
            opts = runner.question.options or ()
            if text.isdigit() and 1 <= int(text) <= len(opts):
                return opts[int(text) - 1]
        return text


def drive(orch: SessionOrchestrator, view: TerminalView) -> None:
    """Run the trial loop until the session completes or is quit."""
    while orch.phase is SessionPhase.RUNNING:
        if orch.scheduler.pending:
            orch.wait()
            continue
        try:
            raw = input(view.prompt())
        except (EOFError, KeyboardInterrupt):
            print()
            orch.quit()
            break
        cmd = raw.strip().lower()
        if cmd == ":q":
            orch.quit()
            break
        if cmd == ":c":
            orch.clear_input()
            continue
        if cmd == ":a":
            orch.replay_audio()
            continue
        try:
            orch.submit(view.parse(raw))
        except InputError as e:
            print(f"  {e}")


def _report(results: List[AssessmentResult], cfg: dict, *, plot_path: Optional[str], narrative: bool) -> None:
    from analytics import ReportConfig, format_report, plot_scores, results_frame, summarize_results

    df = results_frame(results)
    summary = summarize_results(df, ReportConfig())
    print("\nResults:")
    print(format_report(df, summary))
    if plot_path and plot_scores(df, average=summary["average_score"], save_path=plot_path):
        print(f"Chart written to {plot_path}")
    if narrative:
        print("\nAnalysis:")
        print(NarrativeSummarizer.from_config(cfg).generate(results))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="cogscreen")
    p.add_argument("--version", action="version", version=f"cogscreen {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list-modules")

    sp = sub.add_parser("show-module")
    sp.add_argument("--module", required=True)

    rp = sub.add_parser("run")
    rp.add_argument("--config", default=None)
    rp.add_argument("--modules", default=None, help="Comma-separated module ids, e.g. WordRecognition,WorkingMemory")
    rp.add_argument("--seed", type=int, default=None)
    rp.add_argument("--explain", action="store_true")
    rp.add_argument("--speech", dest="speech_enabled", action="store_true", help="Enable speech for this run")
    rp.add_argument("--no-speech", dest="speech_enabled", action="store_false", help="Disable speech for this run")
    rp.set_defaults(speech_enabled=None)
    rp.add_argument("--no-summary", action="store_true", help="Skip the AI narrative")
    rp.add_argument("--plot", default=None, help="Write a score chart to this path")

    args = p.parse_args(argv)

    if args.cmd == "list-modules":
        for m in list_modules():
            print(f"{m.id.value}: {m.name} | runner: {m.runner} | score: {m.formula}")
        return 0

    if args.cmd == "show-module":
        try:
            meta = get_module(args.module)
        except KeyError as e:
            print(str(e))
            return 2
        config = build_module(meta.id, make_rng(0))
        print(f"Module {meta.id.value}: {config.title}")
        print(config.description)
        print(f"Instructions: {config.instructions}")
        print(f"Questions: {len(config.questions) or 'adaptive'}")
        return 0

    if args.cmd == "run":
        if args.explain:
            from .explain import enable as explain_enable
            explain_enable(True)
        cfg = validate_config(load_config(args.config))
        order = cfg["session"]["modules"]
        if args.modules:
            order = [s.strip() for s in args.modules.split(",") if s.strip()]
            valid = {t.value for t in AssessmentType}
            unknown = [m for m in order if m not in valid]
            if unknown:
                print(f"Unknown module(s): {', '.join(unknown)}")
                return 2

        rng = make_rng(args.seed)
        speaker = make_speaker_from_config(cfg, enabled=args.speech_enabled)
        orch = SessionOrchestrator(build_battery(rng, order), cfg, rng=rng, bus=EventBus(), speaker=speaker)
        view = TerminalView(orch)
        try:
            orch.start()
            drive(orch, view)
        finally:
            speaker.close()

        results = orch.results
        if orch.phase is SessionPhase.QUIT:
            print(f"\nSession quit; {len(results)} module(s) completed.")
        if results:
            narrative = orch.phase is SessionPhase.COMPLETE and not args.no_summary and bool(cfg["summary"]["enabled"])
            plot_path = args.plot or cfg["report"].get("plot_path")
            _report(results, cfg, plot_path=plot_path, narrative=narrative)
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
