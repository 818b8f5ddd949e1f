"""Errors raised by the installer. Every one of them ends the run with status 1."""

from __future__ import annotations


class InstallerError(RuntimeError):
    pass


class EnvironmentNotActive(InstallerError):
    """The management environment marker is missing."""


class UnsupportedPlatform(InstallerError):
    pass


class RequiredDirectoryMissing(InstallerError):
    pass


class WizardInputExhausted(InstallerError):
    """No valid yes/no answer could be read."""


class CleanDeclined(InstallerError):
    pass


class VersionCheckFailed(InstallerError):
    pass


class ConfigPatchError(InstallerError):
    pass


class CommandFailed(InstallerError):
    def __init__(self, message: str, returncode: int) -> None:
        super().__init__(message)
        self.returncode = returncode


class UnknownUser(InstallerError):
    """No login name could be determined for a per-user change."""


class VerificationFailed(InstallerError):
    pass
