"""Destructive-command safety gate."""

from bashgate.gate.types import (
    Decision,
    Invocation,
    Rule,
    RuleSet,
    RuleTier,
    Tier,
    UnrecognizedInvocation,
    Verdict,
)
from bashgate.gate.normalize import (
    DEFAULT_NORMALIZE_BINARIES,
    normalize_command,
)
from bashgate.gate.rules import (
    RuleConfigError,
    load_rules,
)
from bashgate.gate.engine import CommandGate, classify
from bashgate.gate.emitter import render_decision
from bashgate.gate.hook import decide, parse_invocation, run_hook

__all__ = [
    "Decision",
    "Invocation",
    "Rule",
    "RuleSet",
    "RuleTier",
    "Tier",
    "UnrecognizedInvocation",
    "Verdict",
    "DEFAULT_NORMALIZE_BINARIES",
    "normalize_command",
    "RuleConfigError",
    "load_rules",
    "CommandGate",
    "classify",
    "render_decision",
    "decide",
    "parse_invocation",
    "run_hook",
]
