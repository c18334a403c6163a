"""Engine Layer - Two-tier search orchestration

This module provides the core engine layer, implementing:
- SearchOrchestrator: Main entry point (fast / deep / auto)
- Deadline: Explicit time budget threaded through the fast path
- should_escalate: Fast → Deep escalation policy
- merge_dedupe: Priority-ordered merge with canonical URL dedup
- SearchItem / SearchReport: Standardized result format
"""

from .budget import Deadline, Stopwatch
from .merge import MergePriority, canonical_key, merge_dedupe
from .orchestrator import SearchOrchestrator
from .result import EngineDiagnostics, EngineName, SearchItem, SearchMode, SearchReport
from .strategy import EscalationReason, escalation_reasons, has_recency_signal, should_escalate

__all__ = [
    "SearchOrchestrator",
    "Deadline",
    "Stopwatch",
    "MergePriority",
    "canonical_key",
    "merge_dedupe",
    "EngineDiagnostics",
    "EngineName",
    "SearchItem",
    "SearchMode",
    "SearchReport",
    "EscalationReason",
    "escalation_reasons",
    "has_recency_signal",
    "should_escalate",
]
