"""Render gate decisions into the host's PreToolUse response."""

from typing import Any

from bashgate.gate.types import Decision

HOOK_EVENT_NAME = "PreToolUse"


def format_deny_message(decision: Decision) -> str:
    """Explain a hard block. The agent cannot appeal it."""
    return (
        f"BLOCKED by bashgate: {decision.reason}.\n\n"
        f"Command: {decision.original_command}\n\n"
        "This command did not run. If it is truly needed, "
        "ask the user to run it manually."
    )


def format_ask_message(decision: Decision) -> str:
    """Pose a short yes/no question for the human approver."""
    return (
        f"bashgate: {decision.reason}.\n\n"
        f"Command: {decision.original_command}\n\n"
        "Allow this command to run?"
    )


def render_decision(decision: Decision) -> dict[str, Any] | None:
    """
    Build the host response for a decision.

    Returns None for allow, meaning nothing is written and the host
    proceeds.
    """
    if decision.tier == "allow":
        return None

    if decision.tier == "deny":
        message = format_deny_message(decision)
    else:
        message = format_ask_message(decision)

    return {
        "hookSpecificOutput": {
            "hookEventName": HOOK_EVENT_NAME,
            "permissionDecision": decision.tier,
            "permissionDecisionReason": message,
        }
    }
