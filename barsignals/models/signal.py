"""Signal request models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Per-bar signal state: "namespace.name" -> satisfied. Sparse: signals whose
# inputs are still warming up are absent rather than False.
SignalState = dict[str, bool]


class CombineMode(str, Enum):
    """How per-signal state combines into one boolean per bar."""

    SIGNALS = "signals"  # OR: any signal true
    CONFIRMATIONS = "confirmations"  # AND: every requested signal true


class SignalDescriptor(BaseModel):
    """A requested signal.

    ``name`` selects the evaluation rule (case-insensitive). ``namespace`` is
    an opaque grouping key that only contributes to the state key.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(min_length=1)
    name: str = Field(min_length=1)

    @property
    def key(self) -> str:
        """State key for this signal: 'namespace.name'."""
        return f"{self.namespace}.{self.name}"
