"""Diagnostic data model for non-fatal scheduling outcomes."""

from typing import Literal

from pydantic import BaseModel, Field


class Diagnostic(BaseModel):
    """
    Represents an expected, non-fatal failure surfaced by the scheduler.

    Diagnostics never stop a run; they are collected so callers can decide
    whether to drop, retry or escalate.
    """

    time: float = Field(ge=0, description="Simulation time when the condition was detected")
    type: Literal[
        "admission_rejected",
        "placement_failed",
        "unknown_completion",
        "invalid_input",
        "task_evicted",
    ] = Field(description="Kind of condition")
    details: dict = Field(
        default_factory=dict,
        description="Additional context: task_id, tier, reason, etc."
    )

    def __str__(self) -> str:
        """Human-readable string representation."""
        details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"[t={self.time:.2f}] {self.type}: {details_str}"
