import asyncio
import logging
import shlex
from typing import TYPE_CHECKING, List, Optional, Sequence

from .config import Config
from .errors import LaunchError

if TYPE_CHECKING:
    from .tunnel import TunnelRequest

logger = logging.getLogger("sshforward")


def build_ssh_command(request: "TunnelRequest", ssh_command: str = "ssh", ssh_options: Sequence[str] = ()) -> List[str]:
    """
    Build the argv for a forward-only ssh session.

    Equivalent to `ssh -L PORT:localhost:PORT user@host -N`: local PORT is
    forwarded to the same PORT on the remote side and no remote command runs.
    """
    command = [ssh_command, "-L", request.forward_spec, "-N"]
    for option in ssh_options:
        command.extend(["-o", option])
    command.append(request.destination)
    return command


async def launch(request: "TunnelRequest", ssh_command: Optional[str] = None,
                 ssh_options: Optional[Sequence[str]] = None) -> asyncio.subprocess.Process:
    """Start the ssh client. stdio is inherited so ssh can prompt for passwords and host keys."""
    if ssh_command is None:
        ssh_command = Config.SSH_COMMAND
    if ssh_options is None:
        ssh_options = Config.SSH_OPTIONS
    command = build_ssh_command(request, ssh_command, ssh_options)
    logger.debug(f"Launching: {shlex.join(command)}")

    try:
        process = await asyncio.create_subprocess_exec(*command)
    except OSError as e:
        raise LaunchError(f"Failed to execute SSH: {e}") from e

    logger.debug(f"ssh started with pid {process.pid}")
    return process
