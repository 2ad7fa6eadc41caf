"""Host boundary: read a PreToolUse request, write the decision."""

import json
from typing import Any, Iterable, TextIO

from loguru import logger

from bashgate.gate.emitter import render_decision
from bashgate.gate.engine import CommandGate
from bashgate.gate.types import Decision, Invocation, UnrecognizedInvocation

DEFAULT_SHELL_TOOLS = ("Bash",)


def parse_invocation(
    payload: str,
    shell_tools: Iterable[str] = DEFAULT_SHELL_TOOLS,
) -> Invocation | UnrecognizedInvocation:
    """
    Extract the shell command from a host request.

    Never raises; anything that is not a shell call with a non-empty string
    command comes back as UnrecognizedInvocation.
    """
    if not payload or not payload.strip():
        return UnrecognizedInvocation(kind="malformed", detail="empty request")

    try:
        data: Any = json.loads(payload)
    except (ValueError, RecursionError) as e:
        return UnrecognizedInvocation(kind="malformed", detail=f"invalid JSON: {e}")

    if not isinstance(data, dict):
        return UnrecognizedInvocation(kind="malformed", detail="request is not an object")

    tool_name = data.get("tool_name")
    if not isinstance(tool_name, str) or not tool_name:
        return UnrecognizedInvocation(kind="malformed", detail="missing tool_name")

    allowed = {t.casefold() for t in shell_tools}
    if tool_name.casefold() not in allowed:
        return UnrecognizedInvocation(kind="unsupported_tool", detail=tool_name)

    tool_input = data.get("tool_input")
    if not isinstance(tool_input, dict):
        return UnrecognizedInvocation(kind="malformed", detail="missing tool_input")

    command = tool_input.get("command")
    if not isinstance(command, str):
        return UnrecognizedInvocation(kind="malformed", detail="command is not a string")
    if not command.strip():
        return UnrecognizedInvocation(kind="malformed", detail="empty command")

    return Invocation(tool_name=tool_name, raw_command=command)


def decide(
    payload: str,
    gate: CommandGate,
    shell_tools: Iterable[str] = DEFAULT_SHELL_TOOLS,
) -> Decision | None:
    """Run one request through the gate. None means it was not inspected."""
    invocation = parse_invocation(payload, shell_tools)
    if isinstance(invocation, UnrecognizedInvocation):
        logger.debug(f"Not inspected ({invocation.kind}): {invocation.detail}")
        return None
    return gate.evaluate(invocation.raw_command)


def run_hook(
    stdin: TextIO,
    stdout: TextIO,
    gate: CommandGate,
    shell_tools: Iterable[str] = DEFAULT_SHELL_TOOLS,
) -> int:
    """
    Serve one host request.

    Returns the process exit status: 0 whenever a decision was reached,
    1 only when the request could not be read at all.
    """
    try:
        payload = stdin.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read hook request: {e}")
        return 1

    decision = decide(payload, gate, shell_tools)
    response = render_decision(decision) if decision else None
    if response is not None:
        stdout.write(json.dumps(response))
        stdout.write("\n")
        stdout.flush()
    return 0
