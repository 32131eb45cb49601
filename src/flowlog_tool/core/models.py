"""Core data structures shared by the parser and the aggregator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PortProtocolKey:
    """Destination port and protocol name identifying a flow group.

    Equality and hashing compare both fields exactly; no trimming or case
    folding is applied, so callers pass already-normalised values.
    """

    port: str
    protocol: str

    def __str__(self) -> str:
        return f"{self.port},{self.protocol}"


# Tag rules map a key to its tag string.
TagRuleMap = dict[PortProtocolKey, str]

__all__ = ["PortProtocolKey", "TagRuleMap"]
