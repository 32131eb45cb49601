from .config import settings, get_settings, Settings
from .constants import *  # noqa: F401,F403
from .models import PortProtocolKey, TagRuleMap
from .protocols import resolve_protocol, is_registered
from ..exceptions import (
    FlowLogToolError,
    FlowLogIOError,
    InputReadError,
    OutputWriteError,
    FlowLogParsingError,
    AggregationError,
    GenerationError,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "PortProtocolKey",
    "TagRuleMap",
    "resolve_protocol",
    "is_registered",
    "FlowLogToolError",
    "FlowLogIOError",
    "InputReadError",
    "OutputWriteError",
    "FlowLogParsingError",
    "AggregationError",
    "GenerationError",
] + [name for name in globals().keys() if name.isupper()]
