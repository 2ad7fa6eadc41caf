"""Rule classifier and the command gate pipeline."""

from typing import Iterable

from loguru import logger

from bashgate.gate.normalize import DEFAULT_NORMALIZE_BINARIES, normalize_command
from bashgate.gate.types import Decision, RuleSet, Verdict


def classify(command: str, rules: RuleSet) -> Verdict:
    """
    Classify a normalized command against the rule tables.

    Safe rules are checked first and short-circuit to allow. Otherwise the
    first dangerous match denies, then the first risky match asks. A
    command matching nothing is allowed.
    """
    for rule in rules.safe:
        if rule.matches(command):
            return Verdict(tier="allow", rule=rule)

    for rule in rules.dangerous:
        if rule.matches(command):
            return Verdict(tier="deny", rule=rule)

    for rule in rules.risky:
        if rule.matches(command):
            return Verdict(tier="ask", rule=rule)

    return Verdict(tier="allow")


class CommandGate:
    """
    Stateless pre-execution gate.

    Holds one RuleSet for its lifetime; `swap_rules` replaces the reference
    in a single assignment so a concurrent `evaluate` sees either the old
    set or the new one.
    """

    def __init__(
        self,
        rules: RuleSet,
        normalize_binaries: Iterable[str] = DEFAULT_NORMALIZE_BINARIES,
    ):
        self._rules = rules
        self._binaries = tuple(normalize_binaries)

    @property
    def rules(self) -> RuleSet:
        return self._rules

    def swap_rules(self, rules: RuleSet) -> None:
        """Replace the active rule tables."""
        self._rules = rules
        logger.info(f"Rule tables replaced ({len(rules)} rules)")

    def evaluate(self, command: str) -> Decision:
        """Normalize, classify and package a decision for one command."""
        rules = self._rules
        normalized = normalize_command(command, self._binaries)
        verdict = classify(normalized, rules)

        # Safe matches are allowed silently; only ask/deny carry a reason
        if verdict.tier == "allow":
            rule_name = verdict.rule.name if verdict.rule else None
            if rule_name:
                logger.debug(f"Allowed by safe rule {rule_name}: {command}")
            return Decision(
                tier="allow",
                original_command=command,
                normalized_command=normalized,
                rule_name=rule_name,
            )

        decision = Decision(
            tier=verdict.tier,
            original_command=command,
            normalized_command=normalized,
            reason=verdict.reason,
            rule_name=verdict.rule.name,
        )
        if decision.tier == "deny":
            logger.warning(f"Denied by {decision.rule_name}: {command}")
        else:
            logger.info(f"Confirmation required by {decision.rule_name}: {command}")
        return decision
