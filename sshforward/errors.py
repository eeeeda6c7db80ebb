"""Errors that end the program with exit status 1."""

import click


class TunnelError(click.ClickException):
    """Base class for fatal sshforward errors.

    click prints these as ``Error: <message>`` on stderr and exits with ``exit_code``.
    """
    exit_code = 1


class PortValidationError(TunnelError):
    """The port argument is not an integer in [1, 65535]."""


class ArgumentValidationError(TunnelError):
    """The host or user argument could be mistaken for an ssh option."""


class PortProbeError(TunnelError):
    """The probe socket could not be created or bound for a reason other than a conflict."""


class PortConflictError(TunnelError):
    """Another listener already holds the local port."""


class LaunchError(TunnelError):
    """The ssh client process could not be started."""
