from __future__ import annotations


class ProvisionError(RuntimeError):
    """Base class for fatal provisioning failures.

    Each subclass carries the process exit code used by the CLI.
    """

    exit_code = 1


class UnsupportedPlatform(ProvisionError):
    exit_code = 2


class InstallError(ProvisionError):
    exit_code = 3


class ResolutionError(ProvisionError):
    exit_code = 4


class FetchError(ProvisionError):
    exit_code = 5


class JavaNotFound(ProvisionError):
    exit_code = 6


class ProfileIOError(ProvisionError):
    exit_code = 7


class ConfigError(ProvisionError):
    """The config file is missing, unreadable or has a bad value."""

    exit_code = 8
