"""External call capability consumed by steps.

Defines the ``ExternalAction`` Protocol that remote-call backends must
satisfy, along with a pass-through default for development.

The wire protocol, authentication and retry policy of a real backend all
live behind ``issue``; the engine only sees canonical values going in and
coming out.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from stepforge.core.canonical import canonicalize


class ExternalActionError(RuntimeError):
    """Raised by an ``ExternalAction`` when a call fails."""


@runtime_checkable
class ExternalAction(Protocol):
    """Protocol for external call backends.

    Any object with an ``issue(request) -> response`` method satisfies this
    protocol. Requests and responses are JSON-compatible values.
    """

    def issue(self, request: Any) -> Any:
        """Perform the call and return its response.

        Raises
        ------
        ExternalActionError
            When the call fails.
        """
        ...


class EchoAction:
    """Pass-through backend that answers with the last message's content.

    Returns ``{"output": <text>, "backend": "echo"}``. Suitable for
    development and tests; production should provide a real backend.
    """

    def __init__(self) -> None:
        self.calls = 0

    def issue(self, request: Any) -> dict[str, Any]:
        self.calls += 1
        try:
            content = canonicalize(request)["messages"][-1]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ExternalActionError(
                "EchoAction expects a request with a non-empty 'messages' list"
            ) from exc
        return {"output": str(content), "backend": "echo"}
