#!/usr/bin/env python3
"""
Entry point for running sshforward as a module.

This allows the package to be executed with:
    python -m sshforward <remotehost> <remoteusername> <port>
"""
from sshforward.cli import cli

if __name__ == "__main__":
    cli()
