"""Orchestration layer - transition rules and the content lifecycle service."""

from cms.orchestration.state_machine import LifecycleService, StatusView
from cms.orchestration.transition_rules import (
    Allow,
    Decision,
    Deny,
    DenyReason,
    KIND_POLICIES,
    TransitionRuleEngine,
)

__all__ = [
    "LifecycleService",
    "StatusView",
    "TransitionRuleEngine",
    "KIND_POLICIES",
    "Allow",
    "Deny",
    "Decision",
    "DenyReason",
]
