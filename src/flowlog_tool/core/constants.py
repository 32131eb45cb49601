"""Centralized constant definitions for flowlog_tool."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# ---------------------------------------------------------------------------
# IP protocol numbers understood by the processor
# ---------------------------------------------------------------------------
PROTOCOL_MAP: Mapping[str, str] = MappingProxyType(
    {
        "1": "ICMP",
        "6": "TCP",
        "17": "UDP",
        "41": "IPv6",
        "47": "GRE",
        "50": "ESP",
        "51": "AH",
        "58": "ICMPv6",
        "89": "OSPF",
    }
)

PROTOCOL_NUMBERS: tuple[str, ...] = tuple(PROTOCOL_MAP.keys())
PROTOCOL_NAMES: tuple[str, ...] = tuple(PROTOCOL_MAP.values())

# ---------------------------------------------------------------------------
# Flow log layout (version 2 VPC flow log columns)
# ---------------------------------------------------------------------------
FLOW_LOG_HEADER: str = (
    "version,account-id,interface-id,srcaddr,dstaddr,srcport,dstport,"
    "protocol,packets,bytes,start,end,action,log-status"
)
FLOW_LOG_MIN_FIELDS: int = 8
FLOW_LOG_DSTPORT_INDEX: int = 6
FLOW_LOG_PROTOCOL_INDEX: int = 7

# ---------------------------------------------------------------------------
# Tag rule layout
# ---------------------------------------------------------------------------
TAG_RULE_HEADER: str = "dstport,protocol,tag"
TAG_RULE_MIN_FIELDS: int = 3

# ---------------------------------------------------------------------------
# Report layout
# ---------------------------------------------------------------------------
PORT_PROTOCOL_COUNT_HEADER: str = "Port,Protocol,Count"
TAG_COUNT_HEADER: str = "Tag,Count"
UNTAGGED: str = "UNTAGGED"

__all__ = [
    "PROTOCOL_MAP",
    "PROTOCOL_NUMBERS",
    "PROTOCOL_NAMES",
    "FLOW_LOG_HEADER",
    "FLOW_LOG_MIN_FIELDS",
    "FLOW_LOG_DSTPORT_INDEX",
    "FLOW_LOG_PROTOCOL_INDEX",
    "TAG_RULE_HEADER",
    "TAG_RULE_MIN_FIELDS",
    "PORT_PROTOCOL_COUNT_HEADER",
    "TAG_COUNT_HEADER",
    "UNTAGGED",
]
