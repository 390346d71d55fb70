"""
Run configuration for a single verification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from site_forge.models import Thresholds

DEFAULT_REPORT_PATH = "forge-report.json"
DEFAULT_SCREENSHOTS_DIR = "screenshots"
DEFAULT_LIGHTHOUSE_CMD = ("npx", "lighthouse")
DEFAULT_VISION_MODEL = "anthropic/claude-sonnet-4-20250514"
DEFAULT_VISION_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_API_KEY_ENV = "OPENROUTER_API_KEY"


@dataclass(frozen=True)
class VerifyConfig:
    site_dir: Path
    baseline_dir: Path | None = None
    vision_threshold: int = 7
    thresholds: Thresholds = field(default_factory=Thresholds)
    report_path: Path = Path(DEFAULT_REPORT_PATH)
    screenshots_dir: Path = Path(DEFAULT_SCREENSHOTS_DIR)
    lighthouse_cmd: tuple[str, ...] = DEFAULT_LIGHTHOUSE_CMD
    lighthouse_timeout: float = 300.0
    vision_model: str = DEFAULT_VISION_MODEL
    vision_endpoint: str = DEFAULT_VISION_ENDPOINT
    vision_timeout: float = 120.0
    api_key_env: str = DEFAULT_API_KEY_ENV
    browser_timeout_ms: int = 60000
    settle_delay: float = 0.5

