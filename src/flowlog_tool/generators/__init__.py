"""Synthetic input generators for flow logs and tag rules."""

from .flow_logs import FlowLogGenerator
from .tag_rules import TagRuleGenerator

__all__ = ["FlowLogGenerator", "TagRuleGenerator"]
