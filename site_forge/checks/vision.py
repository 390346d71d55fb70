"""
VISION check: ask a multimodal model to compare the new screenshots against
a baseline pair and score the result.
"""

from __future__ import annotations

import base64
import os
import re
from pathlib import Path
from typing import Any, Protocol

import requests

from site_forge.checks.screenshots import DESKTOP_FILE, MOBILE_FILE, ScreenshotPair
from site_forge.errors import FilesystemError, ToolExecutionError, ToolUnavailableError
from site_forge.images import image_mime_type
from site_forge.models import Status, VisionResult

OVERALL_RE = re.compile(r"OVERALL:\s*(\d+)\s*/\s*10")

PROMPT = """Compare the original website screenshots (BASELINE) with the redesigned website screenshots (NEW).

Analyze and score the redesign on a scale of 1-10 for each category:
1. Visual polish (is the redesign more professional, modern, and visually appealing?)
2. Brand fidelity (does it still feel like the same business? Same colors, style, vibe?)
3. Content completeness (is anything from the original missing? Are all sections present?)
4. Mobile experience (is mobile layout better, worse, or about the same?)

Then provide an overall score 1-10 with the question: "Would the business owner be impressed?"

Respond in this exact format:
VISUAL_POLISH: X/10
BRAND_FIDELITY: X/10
CONTENT_COMPLETENESS: X/10
MOBILE_EXPERIENCE: X/10
OVERALL: X/10
ANALYSIS: [2-3 sentences of specific feedback on what's better and what could improve]"""


class VisionComparator(Protocol):
    def compare(self, baseline: ScreenshotPair, current: ScreenshotPair) -> str: ...


def parse_overall_score(analysis: str) -> int:
    match = OVERALL_RE.search(analysis or "")
    if not match:
        return 0
    return int(match.group(1))


def encode_image(path: Path) -> str:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FilesystemError(f"failed to read {path}: {exc}") from exc
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{image_mime_type(path)};base64,{encoded}"


def build_messages(baseline: ScreenshotPair, current: ScreenshotPair) -> list[dict[str, Any]]:
    labelled = [
        ("BASELINE - Desktop:\n" + PROMPT, baseline.desktop),
        ("BASELINE - Mobile:\n", baseline.mobile),
        ("NEW - Desktop:\n", current.desktop),
        ("NEW - Mobile:\n", current.mobile),
    ]
    content: list[dict[str, Any]] = []
    for label, path in labelled:
        content.append({"type": "text", "text": label})
        content.append({"type": "image_url", "image_url": {"url": encode_image(path)}})
    return [{"role": "user", "content": content}]


def _message_text(message: dict[str, Any]) -> str:
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [str(part.get("text") or "") for part in content if isinstance(part, dict) and part.get("type") == "text"]
        return "\n".join(p for p in parts if p)
    return ""


class OpenRouterVision:
    """Chat-completions client for OpenRouter's multimodal models."""

    def __init__(
        self,
        model: str,
        endpoint: str = "https://openrouter.ai/api/v1/chat/completions",
        api_key_env: str = "OPENROUTER_API_KEY",
        timeout: float = 120.0,
    ) -> None:
        self.model = model
        self.endpoint = endpoint
        self.api_key_env = api_key_env
        self.timeout = timeout

    def compare(self, baseline: ScreenshotPair, current: ScreenshotPair) -> str:
        api_key = os.environ.get(self.api_key_env, "").strip()
        if not api_key:
            raise ToolUnavailableError(f"{self.api_key_env} not set")

        payload = {"model": self.model, "messages": build_messages(baseline, current)}
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": "https://github.com/misty-step/site-forge",
            "X-Title": "Site Forge",
        }
        try:
            resp = requests.post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise ToolExecutionError(str(exc)) from exc
        if resp.status_code != 200:
            raise ToolExecutionError(f"API returned status {resp.status_code}")
        try:
            body = resp.json()
        except ValueError as exc:
            raise ToolExecutionError(f"Invalid JSON: {exc}") from exc
        choices = body.get("choices") if isinstance(body, dict) else None
        if not choices:
            raise ToolExecutionError("no response from API")
        if not isinstance(choices, list) or not isinstance(choices[0], dict):
            raise ToolExecutionError("unexpected response shape")
        message = choices[0].get("message")
        if not isinstance(message, dict):
            raise ToolExecutionError("unexpected response shape")
        return _message_text(message)


def check_vision(
    baseline_dir: Path | None,
    screenshots_dir: Path,
    threshold: int,
    comparator: VisionComparator,
) -> VisionResult:
    if baseline_dir is None:
        return VisionResult(Status.SKIP, threshold=threshold, details="no baseline provided")

    baseline = ScreenshotPair(desktop=baseline_dir / DESKTOP_FILE, mobile=baseline_dir / MOBILE_FILE)
    current = ScreenshotPair(desktop=screenshots_dir / DESKTOP_FILE, mobile=screenshots_dir / MOBILE_FILE)
    for path in (baseline.desktop, baseline.mobile):
        if not path.exists():
            return VisionResult(Status.SKIP, threshold=threshold, details=f"baseline {path.name} not found in {baseline_dir}")
    for path in (current.desktop, current.mobile):
        if not path.exists():
            return VisionResult(
                Status.SKIP,
                threshold=threshold,
                details=f"new {path.name} not found (run screenshots check first)",
            )

    try:
        analysis = comparator.compare(baseline, current)
    except (ToolUnavailableError, ToolExecutionError, FilesystemError) as exc:
        return VisionResult(Status.SKIP, threshold=threshold, details=f"vision check failed: {exc}")

    score = parse_overall_score(analysis)
    status = Status.PASS if score >= threshold else Status.FAIL
    return VisionResult(
        status,
        score=score,
        threshold=threshold,
        analysis=analysis,
        details=f"Score {score}/10 (threshold: {threshold})",
    )
