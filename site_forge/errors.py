"""
Error taxonomy shared by the checks and their external collaborators.
"""

from __future__ import annotations


class ForgeError(Exception):
    """Base class for every failure a check knows how to turn into a result."""


class FilesystemError(ForgeError):
    pass


class ParseError(ForgeError):
    pass


class ToolUnavailableError(ForgeError):
    """An external tool, browser, or credential is not present."""


class ToolExecutionError(ForgeError):
    """An external tool ran but failed or produced output we cannot use."""


class ThresholdViolation(ForgeError):
    pass
