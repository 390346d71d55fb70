"""
Verification pipeline.

The checks run in a fixed order and each stage has a gate kind that decides
whether its result stops the run:

    NOT_STARTED -> ASSETS -> BUILD -> LIGHTHOUSE -> SCREENSHOTS -> VISION -> DONE

Any gate that halts moves the machine to ABORTED instead.

- HARD (assets, build): anything but PASS aborts.
- SOFT (lighthouse, vision): SKIP continues, FAIL aborts.
- BEST_EFFORT (screenshots): never aborts; a FAIL is only recorded.

The report is written exactly once, on reaching DONE or ABORTED.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from site_forge.checks.assets import check_assets
from site_forge.checks.build import check_build
from site_forge.checks.lighthouse import LighthouseCLI, PageAuditor, check_lighthouse
from site_forge.checks.screenshots import PlaywrightCapturer, ScreenshotCapturer, capture_screenshots
from site_forge.checks.vision import OpenRouterVision, VisionComparator, check_vision
from site_forge.config import VerifyConfig
from site_forge.errors import FilesystemError
from site_forge.models import Report, Status
from site_forge.report import render_summary, write_report


class Stage(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    ASSETS = "ASSETS"
    BUILD = "BUILD"
    LIGHTHOUSE = "LIGHTHOUSE"
    SCREENSHOTS = "SCREENSHOTS"
    VISION = "VISION"
    DONE = "DONE"
    ABORTED = "ABORTED"


class GateKind(Enum):
    HARD = "hard"
    SOFT = "soft"
    BEST_EFFORT = "best_effort"


CHECK_STAGES = (Stage.ASSETS, Stage.BUILD, Stage.LIGHTHOUSE, Stage.SCREENSHOTS, Stage.VISION)

GATES = {
    Stage.ASSETS: GateKind.HARD,
    Stage.BUILD: GateKind.HARD,
    Stage.LIGHTHOUSE: GateKind.SOFT,
    Stage.SCREENSHOTS: GateKind.BEST_EFFORT,
    Stage.VISION: GateKind.SOFT,
}


def halts(gate: GateKind, status: Status) -> bool:
    if gate is GateKind.HARD:
        return status is not Status.PASS
    if gate is GateKind.SOFT:
        return status is Status.FAIL
    if gate is GateKind.BEST_EFFORT:
        return False
    raise ValueError(f"unknown gate kind: {gate!r}")


def derive_verdict(report: Report) -> Status:
    if report.assets.status is not Status.PASS or report.build.status is not Status.PASS:
        return Status.FAIL
    if report.lighthouse.status is Status.FAIL or report.vision.status is Status.FAIL:
        return Status.FAIL
    return Status.PASS


@dataclass(frozen=True)
class Toolkit:
    """External collaborators used by the lighthouse, screenshots and vision checks."""

    auditor: PageAuditor
    capturer: ScreenshotCapturer
    vision: VisionComparator

    @classmethod
    def default(cls, config: VerifyConfig) -> Toolkit:
        return cls(
            auditor=LighthouseCLI(config.lighthouse_cmd, timeout=config.lighthouse_timeout),
            capturer=PlaywrightCapturer(timeout_ms=config.browser_timeout_ms),
            vision=OpenRouterVision(
                config.vision_model,
                endpoint=config.vision_endpoint,
                api_key_env=config.api_key_env,
                timeout=config.vision_timeout,
            ),
        )


@dataclass(frozen=True)
class PipelineOutcome:
    report: Report
    stage: Stage
    halted_at: Stage | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.report.overall is Status.PASS else 1


class Pipeline:
    def __init__(self, config: VerifyConfig, toolkit: Toolkit | None = None) -> None:
        self.config = config
        self.toolkit = toolkit or Toolkit.default(config)
        self.report = Report.pending(str(config.site_dir), config.thresholds, config.vision_threshold)
        self.stage = Stage.NOT_STARTED
        self._runners: dict[Stage, Callable[[], tuple[Status, str]]] = {
            Stage.ASSETS: self._run_assets,
            Stage.BUILD: self._run_build,
            Stage.LIGHTHOUSE: self._run_lighthouse,
            Stage.SCREENSHOTS: self._run_screenshots,
            Stage.VISION: self._run_vision,
        }

    def _run_assets(self) -> tuple[Status, str]:
        result = check_assets(self.config.site_dir)
        self.report.record_assets(result)
        return result.status, result.details

    def _run_build(self) -> tuple[Status, str]:
        result = check_build(self.config.site_dir)
        self.report.record_build(result)
        return result.status, result.details

    def _run_lighthouse(self) -> tuple[Status, str]:
        result = check_lighthouse(
            self.config.site_dir,
            self.config.thresholds,
            self.toolkit.auditor,
            settle_delay=self.config.settle_delay,
        )
        self.report.record_lighthouse(result)
        return result.status, result.details

    def _run_screenshots(self) -> tuple[Status, str]:
        result = capture_screenshots(
            self.config.site_dir,
            self.config.screenshots_dir,
            self.toolkit.capturer,
            settle_delay=self.config.settle_delay,
        )
        self.report.record_screenshots(result)
        return result.status, result.details

    def _run_vision(self) -> tuple[Status, str]:
        result = check_vision(
            self.config.baseline_dir,
            self.config.screenshots_dir,
            self.config.vision_threshold,
            self.toolkit.vision,
        )
        self.report.record_vision(result)
        return result.status, result.details

    def run(self) -> PipelineOutcome:
        if self.stage is not Stage.NOT_STARTED:
            raise RuntimeError("pipeline has already run")

        print(f"Verifying site in: {self.config.site_dir}")
        for index, stage in enumerate(CHECK_STAGES, start=1):
            self.stage = stage
            print(f"[{index}/{len(CHECK_STAGES)}] Running {stage.value} check... ", end="", flush=True)
            status, details = self._runners[stage]()
            print(f"{status.value} ({details})" if details else status.value)
            if halts(GATES[stage], status):
                return self._finish(Stage.ABORTED, halted_at=stage)
        return self._finish(Stage.DONE)

    def _finish(self, terminal: Stage, halted_at: Stage | None = None) -> PipelineOutcome:
        self.stage = terminal
        verdict = derive_verdict(self.report) if terminal is Stage.DONE else Status.FAIL
        self.report.set_overall(verdict)
        print("\n" + render_summary(self.report))
        try:
            path = write_report(self.report, self.config.report_path)
            print(f"Report: {path}")
        except FilesystemError as exc:
            print(f"Error: {exc}", file=sys.stderr)
        if verdict is Status.PASS:
            print("\nAll checks passed!")
        return PipelineOutcome(report=self.report, stage=terminal, halted_at=halted_at)


def run_pipeline(config: VerifyConfig, toolkit: Toolkit | None = None) -> PipelineOutcome:
    return Pipeline(config, toolkit).run()
