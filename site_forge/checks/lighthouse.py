"""
LIGHTHOUSE check: audit the served site for performance, accessibility and SEO.
"""

from __future__ import annotations

import json
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from site_forge.errors import ThresholdViolation, ToolExecutionError, ToolUnavailableError
from site_forge.models import LighthouseResult, Status, Thresholds
from site_forge.server import serve_directory

CATEGORIES = ("performance", "accessibility", "seo")
CHROME_FLAGS = "--headless --no-sandbox --disable-gpu"


@dataclass(frozen=True)
class AuditScores:
    performance: int
    accessibility: int
    seo: int


class PageAuditor(Protocol):
    def ensure_available(self) -> None: ...

    def audit(self, url: str) -> AuditScores: ...


def _tail_lines(text: str, limit: int = 20) -> str:
    lines = [line for line in (text or "").splitlines() if line.strip()]
    return "\n".join(lines[-limit:])


def parse_lighthouse_scores(payload: dict[str, Any]) -> AuditScores:
    categories = payload.get("categories")
    if not isinstance(categories, dict):
        raise ToolExecutionError("lighthouse report has no categories object")
    scores: dict[str, int] = {}
    for key in CATEGORIES:
        entry = categories.get(key)
        if not isinstance(entry, dict):
            raise ToolExecutionError(f"lighthouse report has no {key} category")
        raw = entry.get("score")
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ToolExecutionError(f"lighthouse report has no {key} score")
        scores[key] = int(round(float(raw) * 100))
    return AuditScores(**scores)


class LighthouseCLI:
    """Runs the lighthouse command line tool as a subprocess."""

    def __init__(self, command: tuple[str, ...] = ("npx", "lighthouse"), timeout: float = 300.0) -> None:
        self.command = list(command)
        self.timeout = timeout

    def ensure_available(self) -> None:
        if shutil.which(self.command[0]) is None:
            raise ToolUnavailableError(f"{self.command[0]} not found on PATH (run: npm install -g lighthouse)")
        try:
            proc = subprocess.run(self.command + ["--version"], capture_output=True, text=True, timeout=120)
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise ToolUnavailableError(f"lighthouse not available: {exc}") from exc
        if proc.returncode != 0:
            raise ToolUnavailableError("lighthouse not installed (run: npm install -g lighthouse)")

    def audit(self, url: str) -> AuditScores:
        with tempfile.TemporaryDirectory(prefix="site-forge-lighthouse-") as tmp:
            out_path = Path(tmp) / "report.json"
            cmd = self.command + [
                url,
                "--output=json",
                f"--output-path={out_path}",
                f"--chrome-flags={CHROME_FLAGS}",
                "--quiet",
                f"--only-categories={','.join(CATEGORIES)}",
            ]
            try:
                proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
            except subprocess.TimeoutExpired as exc:
                raise ToolExecutionError(f"lighthouse timeout after {self.timeout:g}s") from exc
            except OSError as exc:
                raise ToolExecutionError(f"lighthouse could not start: {exc}") from exc
            if proc.returncode != 0:
                output = _tail_lines((proc.stdout or "") + "\n" + (proc.stderr or ""))
                raise ToolExecutionError(f"lighthouse exited with code {proc.returncode}: {output}")
            try:
                payload = json.loads(out_path.read_text(encoding="utf-8"))
            except OSError as exc:
                raise ToolExecutionError(f"failed to read lighthouse output: {exc}") from exc
            except json.JSONDecodeError as exc:
                raise ToolExecutionError(f"failed to parse lighthouse JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ToolExecutionError("lighthouse JSON is not an object")
        return parse_lighthouse_scores(payload)


def enforce_thresholds(scores: AuditScores, thresholds: Thresholds) -> None:
    below = [
        f"{label} {value} < {limit}"
        for label, value, limit in (
            ("performance", scores.performance, thresholds.performance),
            ("accessibility", scores.accessibility, thresholds.accessibility),
            ("seo", scores.seo, thresholds.seo),
        )
        if value < limit
    ]
    if below:
        raise ThresholdViolation("below threshold: " + ", ".join(below))


def check_lighthouse(
    site_dir: Path,
    thresholds: Thresholds,
    auditor: PageAuditor,
    settle_delay: float = 0.5,
) -> LighthouseResult:
    try:
        auditor.ensure_available()
        with serve_directory(site_dir, settle_delay) as url:
            scores = auditor.audit(url)
    except ToolUnavailableError as exc:
        return LighthouseResult(Status.SKIP, thresholds=thresholds, details=str(exc))
    except ToolExecutionError as exc:
        return LighthouseResult(Status.FAIL, thresholds=thresholds, details=f"lighthouse failed: {exc}")

    details = f"Perf: {scores.performance}, A11y: {scores.accessibility}, SEO: {scores.seo}"
    status = Status.PASS
    try:
        enforce_thresholds(scores, thresholds)
    except ThresholdViolation as exc:
        status = Status.FAIL
        details = f"{details} ({exc})"
    return LighthouseResult(
        status,
        performance=scores.performance,
        accessibility=scores.accessibility,
        seo=scores.seo,
        thresholds=thresholds,
        details=details,
    )
