"""Type definitions for the command safety gate."""

import re
from dataclasses import dataclass
from typing import Literal

# Rule tiers, in evaluation order
RuleTier = Literal["safe", "dangerous", "risky"]

# Verdicts handed to the host
Tier = Literal["allow", "ask", "deny"]

# Why an invocation was not inspected
UnrecognizedKind = Literal["malformed", "unsupported_tool"]

RULE_TIERS: tuple[RuleTier, ...] = ("safe", "dangerous", "risky")


@dataclass(frozen=True)
class Rule:
    """A compiled pattern with its tier and explanation."""
    name: str
    tier: RuleTier
    pattern: re.Pattern[str]
    reason: str

    def matches(self, command: str) -> bool:
        return self.pattern.search(command) is not None


@dataclass(frozen=True)
class RuleSet:
    """Immutable, ordered rule tables."""
    safe: tuple[Rule, ...] = ()
    dangerous: tuple[Rule, ...] = ()
    risky: tuple[Rule, ...] = ()

    def __iter__(self):
        yield from self.safe
        yield from self.dangerous
        yield from self.risky

    def __len__(self) -> int:
        return len(self.safe) + len(self.dangerous) + len(self.risky)

    def tier(self, name: RuleTier) -> tuple[Rule, ...]:
        return getattr(self, name)


@dataclass(frozen=True)
class Invocation:
    """A shell tool call the gate should inspect."""
    tool_name: str
    raw_command: str


@dataclass(frozen=True)
class UnrecognizedInvocation:
    """A request the gate declines to inspect (always allowed)."""
    kind: UnrecognizedKind
    detail: str


@dataclass(frozen=True)
class Verdict:
    """Classifier output for a normalized command."""
    tier: Tier
    rule: Rule | None = None

    @property
    def reason(self) -> str | None:
        return self.rule.reason if self.rule else None


@dataclass(frozen=True)
class Decision:
    """Final gate decision for one command."""
    tier: Tier
    original_command: str
    normalized_command: str = ""
    reason: str | None = None
    rule_name: str | None = None
