import click
import logging
from .config import Config
from .probe import ensure_port_available
from .tunnel import TunnelRequest, run_tunnel


class TunnelCommand(click.Command):
    """Command whose usage errors exit with status 1 instead of click's default 2."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(cls=TunnelCommand)
@click.argument("remotehost")
@click.argument("remoteusername")
@click.argument("port")
@click.option("--log-level", default="INFO", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              envvar="SSHFORWARD_LOG_LEVEL", help="Log level (can be set via SSHFORWARD_LOG_LEVEL)")
def cli(remotehost, remoteusername, port, log_level):
    """Forward local PORT to PORT on REMOTEHOST through ssh as REMOTEUSERNAME.

    \b
    REMOTEHOST      The remote host to connect to (e.g., example.com)
    REMOTEUSERNAME  The username for the remote host
    PORT            The port to forward (1-65535)

    Runs `ssh -L PORT:localhost:PORT REMOTEUSERNAME@REMOTEHOST -N` until
    interrupted with Ctrl+C.
    """
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    request = TunnelRequest.from_args(remotehost, remoteusername, port)
    Config.validate()
    ensure_port_available(request.port)
    run_tunnel(request)


if __name__ == "__main__":
    cli()
