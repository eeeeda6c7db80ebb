"""
sshforward - Keep a local TCP port forwarded to a remote host through the system ssh client.

A thin supervisor around `ssh -L PORT:localhost:PORT user@host -N`.
"""

__version__ = "1.0.0"
__description__ = "Keep a local TCP port forwarded to a remote host through the system ssh client"
