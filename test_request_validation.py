#!/usr/bin/env python3
"""Tests for turning command-line arguments into a TunnelRequest."""

import pytest

from sshforward.errors import ArgumentValidationError, PortValidationError
from sshforward.tunnel import TunnelRequest


def test_valid_request():
    request = TunnelRequest.from_args("example.com", "alice", "8080")
    assert request == TunnelRequest(remote_host="example.com", remote_user="alice", port=8080)
    assert request.destination == "alice@example.com"
    assert request.forward_spec == "8080:localhost:8080"


@pytest.mark.parametrize("port_text", ["1", "22", "65535", " 443 "])
def test_ports_in_range_are_accepted(port_text):
    assert TunnelRequest.from_args("example.com", "alice", port_text).port == int(port_text)


@pytest.mark.parametrize("port_text", ["0", "65536", "99999", "000000"])
def test_ports_out_of_range_are_rejected(port_text):
    with pytest.raises(PortValidationError) as exc_info:
        TunnelRequest.from_args("example.com", "alice", port_text)
    assert exc_info.value.message == "Port must be between 1 and 65535."
    assert exc_info.value.exit_code == 1


@pytest.mark.parametrize("port_text", ["", "http", "80abc", "8.0", "0x50", "-1", "+8080", "8_080", "\u0668\u0660\u0668\u0660", "\uff18\uff10\uff18\uff10"])
def test_non_numeric_ports_are_rejected(port_text):
    with pytest.raises(PortValidationError, match="must be a number"):
        TunnelRequest.from_args("example.com", "alice", port_text)


@pytest.mark.parametrize("host,user", [
    ("", "alice"),
    ("example.com", ""),
    ("-oProxyCommand=touch /tmp/x", "alice"),
    ("example.com", "-F/dev/null"),
    ("example .com", "alice"),
    ("example.com", "al ice"),
    ("evil@example.com", "alice"),
    ("alice@example.com", "bob"),
])
def test_host_and_user_that_look_like_options_are_rejected(host, user):
    with pytest.raises(ArgumentValidationError):
        TunnelRequest.from_args(host, user, "8080")


def test_request_is_immutable():
    request = TunnelRequest.from_args("example.com", "alice", "8080")
    with pytest.raises(AttributeError):
        request.port = 9090


def test_user_may_contain_at_sign():
    # ssh splits the destination on the last '@', so this logs in as alice@corp.com
    request = TunnelRequest.from_args("example.com", "alice@corp.com", "8080")
    assert request.remote_user == "alice@corp.com"
    assert request.destination == "alice@corp.com@example.com"


def test_host_with_at_sign_cannot_change_the_login_user():
    with pytest.raises(ArgumentValidationError, match="must not contain '@'"):
        TunnelRequest.from_args("evil@example.com", "alice", "8080")
