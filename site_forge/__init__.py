"""
site-forge: a pass/fail quality gate for built static websites.
"""

from __future__ import annotations

from site_forge.config import VerifyConfig
from site_forge.models import Report, Status
from site_forge.pipeline import Pipeline, PipelineOutcome, Toolkit, run_pipeline

__version__ = "0.1.0"

__all__ = ["Pipeline", "PipelineOutcome", "Report", "Status", "Toolkit", "VerifyConfig", "run_pipeline", "__version__"]
