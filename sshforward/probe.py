"""Point-in-time check of whether a local TCP port is free."""

import errno
import logging
import socket
from enum import Enum

from .errors import PortConflictError, PortProbeError

logger = logging.getLogger("sshforward")

# ssh -L binds the loopback address by default
PROBE_HOST = "127.0.0.1"


class PortStatus(Enum):
    AVAILABLE = "available"
    IN_USE = "in use"


def probe_port(port: int, host: str = PROBE_HOST) -> PortStatus:
    """
    Try to bind a TCP socket to host:port and release it straight away.

    The port is not reserved; something else may bind it before ssh does.

    Raises:
        PortProbeError: the socket could not be created, or bind failed for
            a reason other than EADDRINUSE.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as e:
        raise PortProbeError(f"Socket creation failed: {e}") from e

    with sock:
        try:
            sock.bind((host, port))
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                logger.debug(f"Probe of {host}:{port}: address already in use")
                return PortStatus.IN_USE
            raise PortProbeError(f"Bind failed: {e}") from e

    logger.debug(f"Probe of {host}:{port}: available")
    return PortStatus.AVAILABLE


def ensure_port_available(port: int, host: str = PROBE_HOST) -> None:
    if probe_port(port, host) is PortStatus.IN_USE:
        raise PortConflictError(f"Port {port} is already bound. Exiting.")
