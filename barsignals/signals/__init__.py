"""Signal rules, observers and the group evaluator."""

from barsignals.signals.evaluator import generate_signals
from barsignals.signals.observer import LoggingObserver, NullObserver, SignalObserver
from barsignals.signals.rules import (
    Comparison,
    EvaluationContext,
    RuleKind,
    SignalRule,
    get_rule,
    list_rules,
    register_rule,
)

__all__ = [
    "generate_signals",
    "LoggingObserver",
    "NullObserver",
    "SignalObserver",
    "Comparison",
    "EvaluationContext",
    "RuleKind",
    "SignalRule",
    "get_rule",
    "list_rules",
    "register_rule",
]
