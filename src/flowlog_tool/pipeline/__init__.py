"""Pipeline framework for flow log processing."""

from .base import Pipeline
from .components import BaseAnalyzer, BaseProcessor, BaseReporter, Context
from .stages import CsvReporter, FlowLogLoader, PortProtocolCounter, TagCounter

__all__ = [
    "Pipeline",
    "BaseProcessor",
    "BaseAnalyzer",
    "BaseReporter",
    "Context",
    "FlowLogLoader",
    "PortProtocolCounter",
    "TagCounter",
    "CsvReporter",
]
