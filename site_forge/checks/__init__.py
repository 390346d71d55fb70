"""
The five verification checks, in pipeline order.
"""

from __future__ import annotations

from site_forge.checks.assets import check_assets
from site_forge.checks.build import check_build
from site_forge.checks.lighthouse import check_lighthouse
from site_forge.checks.screenshots import capture_screenshots
from site_forge.checks.vision import check_vision

__all__ = ["check_assets", "check_build", "check_lighthouse", "capture_screenshots", "check_vision"]
