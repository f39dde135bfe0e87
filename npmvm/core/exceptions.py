"""
Centralized exception hierarchy for npmvm.

This module defines all custom exceptions used across the codebase
so that callers can distinguish invalid input, empty matches and
upstream failures without inspecting messages.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class NpmvmError(Exception):
    """Base exception for all npmvm errors."""

    pass


class ConfigError(NpmvmError):
    """Settings file parsing or validation error."""

    pass


# ============================================================================
# Version Exceptions
# ============================================================================


class VersionError(NpmvmError):
    """Base exception for version specifier errors."""

    pass


class InvalidVersionError(VersionError):
    """Raised when a specifier does not clean to a valid semantic version."""

    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(f"Invalid version: {spec!r}")


class InvalidSpecifierError(VersionError):
    """Raised when a specifier is neither a version nor a version range."""

    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(f'Version spec, "{spec}", is not a valid version or range')


class NoMatchingVersionError(VersionError):
    """Raised when a specifier satisfies nothing in the candidate pool."""

    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(f'Version spec, "{spec}", didn\'t match any version')


# ============================================================================
# Upstream Exceptions
# ============================================================================


class UpstreamUnavailableError(NpmvmError):
    """Raised when the release feed cannot be queried."""

    pass


class RuntimeQueryError(NpmvmError):
    """Raised when the host runtime cannot report its (matching) version."""

    pass


# ============================================================================
# Install Exceptions
# ============================================================================


class InstallError(NpmvmError):
    """Base exception for install pipeline errors."""

    pass


class DownloadError(InstallError):
    """Raised when the release archive cannot be downloaded."""

    pass


class ExtractionError(InstallError):
    """Raised when the release archive cannot be extracted."""

    pass


# ============================================================================
# Version Store Exceptions
# ============================================================================


class VersionStoreError(NpmvmError):
    """Raised when an active-version file cannot be written."""

    def __init__(self, spec: str, reason: str):
        self.spec = spec
        self.reason = reason
        super().__init__(f"Could not set npm version {spec} ({reason})")
