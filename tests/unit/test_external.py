"""Tests for the development echo backend."""

from __future__ import annotations

import pytest

from stepforge.core.external import EchoAction, ExternalAction, ExternalActionError
from stepforge.models.requests import ChatRequest, Message


def test_echoes_last_message():
    action = EchoAction()
    request = ChatRequest(
        model="m", messages=[Message(role="system", content="sys"), Message(content="hi")]
    )
    assert action.issue(request) == {"output": "hi", "backend": "echo"}
    assert action.calls == 1


@pytest.mark.parametrize("request_value", [{}, {"messages": []}, "plain text"])
def test_rejects_requests_without_messages(request_value):
    with pytest.raises(ExternalActionError):
        EchoAction().issue(request_value)


def test_is_an_external_action():
    assert isinstance(EchoAction(), ExternalAction)
