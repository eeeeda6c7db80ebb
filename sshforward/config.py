import logging
import os
import shutil
from typing import Optional

logger = logging.getLogger("sshforward")


class Config:
    """Runtime configuration from environment variables"""

    # SSH client
    SSH_COMMAND: str = os.getenv("SSHFORWARD_SSH_COMMAND", "ssh")
    # Comma-separated list passed to the client as repeated -o flags, e.g. "ExitOnForwardFailure=yes,ServerAliveInterval=30"
    SSH_OPTIONS: list[str] = [o.strip() for o in os.getenv("SSHFORWARD_SSH_OPTIONS", "").split(",") if o.strip()]

    # Seconds to wait for ssh after SIGTERM before it is killed
    TERMINATE_TIMEOUT: float = float(os.getenv("SSHFORWARD_TERMINATE_TIMEOUT", "5"))

    @classmethod
    def validate(cls):
        """Validate configuration, logging anything suspicious"""
        if cls.TERMINATE_TIMEOUT <= 0:
            logger.warning(f"     SSHFORWARD_TERMINATE_TIMEOUT is {cls.TERMINATE_TIMEOUT}; ssh will be killed without a grace period")

        if not cls.resolve_ssh_command():
            logger.warning(f"     SSH client '{cls.SSH_COMMAND}' not found on PATH. Set SSHFORWARD_SSH_COMMAND to its location.")

        for option in cls.SSH_OPTIONS:
            if "=" not in option:
                logger.warning(f"     SSH option '{option}' has no '=' and may be rejected by the client")

    @classmethod
    def resolve_ssh_command(cls) -> Optional[str]:
        """Return the full path of the configured ssh client, or None if it cannot be found"""
        return shutil.which(cls.SSH_COMMAND)
