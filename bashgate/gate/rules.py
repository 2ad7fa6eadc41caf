"""Rule file schema, compilation and loading."""

import json
import re
from importlib import resources
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from bashgate.gate.types import RULE_TIERS, Rule, RuleSet, RuleTier

DEFAULT_RULES_RESOURCE = "default_rules.json"


class RuleConfigError(ValueError):
    """Raised when a rule table cannot be loaded. Fatal at startup."""


class RuleEntry(BaseModel):
    """One rule as written in a rules file."""
    name: str
    pattern: str
    reason: str

    @field_validator("name", "reason")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return value


class RuleFile(BaseModel):
    """Top-level shape of a rules file."""
    version: int = 1
    safe: list[RuleEntry] = Field(default_factory=list)
    dangerous: list[RuleEntry] = Field(default_factory=list)
    risky: list[RuleEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


def _format_validation_error(source: str, err: ValidationError) -> str:
    lines = [f"Invalid rules in {source}:"]
    for item in err.errors():
        loc = ".".join(str(p) for p in item["loc"])
        lines.append(f"  {loc}: {item['msg']}")
    return "\n".join(lines)


def parse_rule_file(data: Any, source: str = "<rules>") -> RuleFile:
    """Validate decoded JSON against the rules file schema."""
    try:
        return RuleFile.model_validate(data)
    except ValidationError as e:
        raise RuleConfigError(_format_validation_error(source, e)) from e


def read_rule_file(path: Path) -> RuleFile:
    """Read and validate a rules file from disk."""
    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleConfigError(f"Cannot read rules file {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RuleConfigError(f"Rules file {path} is not valid JSON: {e}") from e

    return parse_rule_file(data, source=str(path))


def read_default_rule_file() -> RuleFile:
    """Read the rule table shipped with the package."""
    text = resources.files("bashgate.gate").joinpath(DEFAULT_RULES_RESOURCE).read_text(encoding="utf-8")
    return parse_rule_file(json.loads(text), source=DEFAULT_RULES_RESOURCE)


def compile_rules(*files: RuleFile) -> RuleSet:
    """
    Compile rule files into one immutable RuleSet.

    Files are concatenated per tier in the order given. Rule names must be
    unique across the result.
    """
    tables: dict[RuleTier, list[Rule]] = {tier: [] for tier in RULE_TIERS}
    seen: set[str] = set()

    for rule_file in files:
        for tier in RULE_TIERS:
            for entry in getattr(rule_file, tier):
                if entry.name in seen:
                    raise RuleConfigError(f"Duplicate rule name: {entry.name}")
                seen.add(entry.name)
                tables[tier].append(Rule(
                    name=entry.name,
                    tier=tier,
                    pattern=re.compile(entry.pattern),
                    reason=entry.reason,
                ))

    return RuleSet(
        safe=tuple(tables["safe"]),
        dangerous=tuple(tables["dangerous"]),
        risky=tuple(tables["risky"]),
    )


def load_rules(path: str | Path | None = None, include_defaults: bool = True) -> RuleSet:
    """
    Load the rule tables used for the lifetime of the process.

    The shipped defaults come first unless `include_defaults` is False; an
    operator file at `path` is appended after them.
    """
    files: list[RuleFile] = []
    if include_defaults:
        files.append(read_default_rule_file())
    if path:
        files.append(read_rule_file(Path(path)))

    if not files:
        raise RuleConfigError("No rules configured: defaults disabled and no rules file given")

    rules = compile_rules(*files)
    logger.debug(
        f"Loaded {len(rules)} rules "
        f"(safe={len(rules.safe)}, dangerous={len(rules.dangerous)}, risky={len(rules.risky)})"
    )
    return rules


def dump_rule_file(rules: RuleSet) -> dict[str, Any]:
    """Serialize a RuleSet back to rules file form."""
    data: dict[str, Any] = {"version": 1}
    for tier in RULE_TIERS:
        data[tier] = [
            {"name": r.name, "pattern": r.pattern.pattern, "reason": r.reason}
            for r in rules.tier(tier)
        ]
    return data
