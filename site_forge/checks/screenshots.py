"""
SCREENSHOTS check: capture desktop and mobile renders of the served site.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from site_forge.errors import ToolExecutionError, ToolUnavailableError
from site_forge.images import bitmap_size
from site_forge.models import ScreenshotsResult, Status
from site_forge.server import serve_directory

DESKTOP_FILE = "desktop.png"
MOBILE_FILE = "mobile.png"
DESKTOP_VIEWPORT = {"width": 1280, "height": 900}
MOBILE_VIEWPORT = {"width": 390, "height": 844}
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.0 Mobile/15E148 Safari/604.1"
)
PLAYWRIGHT_HINT = "Playwright unavailable. Install with: pip install playwright && python -m playwright install chromium"


@dataclass(frozen=True)
class ScreenshotPair:
    desktop: Path
    mobile: Path


class ScreenshotCapturer(Protocol):
    def capture(self, url: str, out_dir: Path) -> ScreenshotPair: ...


class PlaywrightCapturer:
    """Headless Chromium through Playwright's sync API."""

    def __init__(self, timeout_ms: int = 60000, settle_ms: int = 1000) -> None:
        self.timeout_ms = timeout_ms
        self.settle_ms = settle_ms

    def _shoot(self, browser: Any, url: str, path: Path, viewport: dict[str, int], user_agent: str | None) -> None:
        context = browser.new_context(viewport=viewport, user_agent=user_agent)
        try:
            page = context.new_page()
            page.goto(url, wait_until="load", timeout=self.timeout_ms)
            page.wait_for_selector("body", state="visible", timeout=self.timeout_ms)
            page.wait_for_timeout(self.settle_ms)
            page.screenshot(path=str(path), full_page=True)
        finally:
            context.close()

    def capture(self, url: str, out_dir: Path) -> ScreenshotPair:
        try:
            from playwright.sync_api import Error as PlaywrightError
            from playwright.sync_api import sync_playwright
        except ImportError as exc:
            raise ToolUnavailableError(PLAYWRIGHT_HINT) from exc

        try:
            manager = sync_playwright().start()
        except PlaywrightError as exc:
            raise ToolUnavailableError(f"Playwright driver failed to start: {exc}") from exc
        try:
            try:
                browser = manager.chromium.launch(headless=True, args=["--no-sandbox", "--disable-gpu"])
            except PlaywrightError as exc:
                raise ToolUnavailableError(f"Chromium unavailable: {exc}") from exc
            try:
                desktop = out_dir / DESKTOP_FILE
                mobile = out_dir / MOBILE_FILE
                self._shoot(browser, url, desktop, DESKTOP_VIEWPORT, None)
                self._shoot(browser, url, mobile, MOBILE_VIEWPORT, MOBILE_USER_AGENT)
            except PlaywrightError as exc:
                raise ToolExecutionError(f"screenshot capture failed: {exc}") from exc
            finally:
                browser.close()
        finally:
            manager.stop()
        return ScreenshotPair(desktop=desktop, mobile=mobile)


def capture_screenshots(
    site_dir: Path,
    out_dir: Path,
    capturer: ScreenshotCapturer,
    settle_delay: float = 0.5,
) -> ScreenshotsResult:
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return ScreenshotsResult(Status.FAIL, details=f"Failed to create screenshots directory: {exc}")

    try:
        with serve_directory(site_dir, settle_delay) as url:
            pair = capturer.capture(url, out_dir)
        desktop_size = bitmap_size(pair.desktop)
        mobile_size = bitmap_size(pair.mobile)
    except ToolUnavailableError as exc:
        return ScreenshotsResult(Status.SKIP, details=str(exc))
    except ToolExecutionError as exc:
        return ScreenshotsResult(Status.FAIL, details=str(exc))

    return ScreenshotsResult(
        Status.PASS,
        desktop=str(pair.desktop),
        mobile=str(pair.mobile),
        desktop_size=desktop_size,
        mobile_size=mobile_size,
        details=f"Desktop: {pair.desktop}, Mobile: {pair.mobile}",
    )
