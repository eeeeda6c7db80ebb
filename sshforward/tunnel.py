import asyncio
import logging
import signal
from dataclasses import dataclass
from typing import Optional, Sequence

from .config import Config
from .errors import ArgumentValidationError, PortValidationError
from .launcher import launch

logger = logging.getLogger("sshforward")

MIN_PORT = 1
MAX_PORT = 65535


@dataclass(frozen=True)
class TunnelRequest:
    remote_host: str
    remote_user: str
    port: int

    @classmethod
    def from_args(cls, remote_host: str, remote_user: str, port_text: str) -> "TunnelRequest":
        """
        Validate command-line input and build a request.

        Raises:
            PortValidationError: port is not numeric or outside [1, 65535]
            ArgumentValidationError: host or user is empty, contains whitespace,
                or starts with '-', or the host contains '@'
        """
        digits = port_text.strip()
        if not (digits.isascii() and digits.isdigit()):
            raise PortValidationError(f"Port must be a number, got '{port_text}'.")
        port = int(digits)

        if port < MIN_PORT or port > MAX_PORT:
            raise PortValidationError(f"Port must be between {MIN_PORT} and {MAX_PORT}.")

        _check_ssh_word("remote host", remote_host)
        _check_ssh_word("remote username", remote_user)
        # ssh splits user@host on the last '@', so only the host must be free of it
        if "@" in remote_host:
            raise ArgumentValidationError(f"Invalid remote host '{remote_host}': must not contain '@'.")

        return cls(remote_host=remote_host, remote_user=remote_user, port=port)

    @property
    def destination(self) -> str:
        return f"{self.remote_user}@{self.remote_host}"

    @property
    def forward_spec(self) -> str:
        return f"{self.port}:localhost:{self.port}"


def _check_ssh_word(name: str, value: str):
    if not value:
        raise ArgumentValidationError(f"Invalid {name}: must not be empty.")
    if value.startswith("-"):
        raise ArgumentValidationError(f"Invalid {name} '{value}': must not start with '-'.")
    if any(c.isspace() for c in value):
        raise ArgumentValidationError(f"Invalid {name} '{value}': must not contain whitespace.")


class Tunnel:
    """Owns the ssh child process and the shutdown event that stops it."""

    def __init__(self, request: TunnelRequest, ssh_command: Optional[str] = None,
                 ssh_options: Optional[Sequence[str]] = None,
                 terminate_timeout: Optional[float] = None):
        self.request = request
        # None means "whatever Config says right now"
        self.ssh_command = Config.SSH_COMMAND if ssh_command is None else ssh_command
        self.ssh_options = tuple(Config.SSH_OPTIONS if ssh_options is None else ssh_options)
        self.terminate_timeout = Config.TERMINATE_TIMEOUT if terminate_timeout is None else terminate_timeout
        self.process: Optional[asyncio.subprocess.Process] = None
        self.shutdown_event = asyncio.Event()

    async def start(self) -> asyncio.subprocess.Process:
        if self.process is not None:
            raise RuntimeError("Tunnel already started")
        self.process = await launch(self.request, self.ssh_command, self.ssh_options)
        return self.process

    def stop(self):
        """Request shutdown. Safe to call before start() and more than once."""
        if self.shutdown_event.is_set():
            # Second request while shutting down: don't wait for ssh any longer
            if self.process is not None and self.process.returncode is None:
                logger.info("Force stopping tunnel!")
                try:
                    self.process.kill()
                except ProcessLookupError:
                    pass
            return
        logger.info("Stopping tunnel...")
        self.shutdown_event.set()

    async def wait(self) -> Optional[int]:
        """
        Block until ssh exits or shutdown is requested, whichever comes first.

        On shutdown the child gets SIGTERM, then SIGKILL if it is still alive
        after terminate_timeout seconds.

        Returns:
            The ssh return code, or None if nothing was launched.
        """
        if self.process is None:
            return None

        exit_task = asyncio.create_task(self.process.wait())
        shutdown_task = asyncio.create_task(self.shutdown_event.wait())

        done, pending = await asyncio.wait(
            {exit_task, shutdown_task},
            return_when=asyncio.FIRST_COMPLETED
        )

        for task in pending:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if exit_task in done:
            logger.info("Tunnel closed")
            logger.debug(f"ssh exited with status {self.process.returncode}")
            return self.process.returncode

        return await self._terminate()

    async def _terminate(self) -> int:
        if self.process.returncode is None:
            try:
                self.process.terminate()
            except ProcessLookupError:
                pass
        try:
            await asyncio.wait_for(self.process.wait(), timeout=self.terminate_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"ssh did not exit {self.terminate_timeout}s after SIGTERM, killing it")
            try:
                self.process.kill()
            except ProcessLookupError:
                pass
            await self.process.wait()
        logger.debug(f"ssh exited with status {self.process.returncode}")
        return self.process.returncode

    async def run(self) -> Optional[int]:
        """Install signal handlers, launch ssh and supervise it until it exits or is interrupted."""
        loop = asyncio.get_running_loop()
        # Handlers go in before launch so an early Ctrl+C is still honoured
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.stop)

        try:
            if self.shutdown_event.is_set():
                logger.debug("Shutdown requested before launch, not starting ssh")
                return None

            await self.start()
            logger.info(
                f"Tunnel established: localhost:{self.request.port} -> "
                f"{self.request.remote_host}:{self.request.port}. Press Ctrl+C to stop."
            )
            return await self.wait()
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)


def run_tunnel(request: TunnelRequest, ssh_command: Optional[str] = None,
               ssh_options: Optional[Sequence[str]] = None,
               terminate_timeout: Optional[float] = None) -> Optional[int]:
    async def _main():
        tunnel = Tunnel(request, ssh_command, ssh_options, terminate_timeout)
        return await tunnel.run()

    return asyncio.run(_main())
