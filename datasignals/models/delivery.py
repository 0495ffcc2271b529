"""Delivery outcome models returned by the dispatcher."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DeliveryFailure(BaseModel):
    """One listener invocation that raised."""

    model_config = ConfigDict(frozen=True)

    signal: str
    recipient: str  # repr of the receiving actor
    callback: str  # repr of the failing callback
    error_type: str
    error: str


class DeliveryReport(BaseModel):
    """Outcome of a single send.

    ``error_count`` is the number the public ``send`` operation returns.
    """

    model_config = ConfigDict(frozen=True)

    signal: str
    recipients: int = 0
    invocations: int = 0
    failures: list[DeliveryFailure] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures
