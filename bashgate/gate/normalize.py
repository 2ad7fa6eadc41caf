"""Leading absolute-path normalization for shell commands."""

import re
from functools import lru_cache
from typing import Iterable

# Binaries whose absolute-path invocation is rewritten to the bare name
DEFAULT_NORMALIZE_BINARIES = (
    "rm", "git", "mv", "truncate", "find", "dd", "shred",
)


@lru_cache(maxsize=32)
def _leading_path_pattern(binaries: tuple[str, ...]) -> re.Pattern[str]:
    names = "|".join(re.escape(b) for b in sorted(binaries, key=len, reverse=True))
    # Leading whitespace, then /dir/.../bin/<name> or /dir/.../sbin/<name> as a whole token
    return re.compile(
        rf"^(\s*)(?:/[^\s/]+)*/s?bin/({names})(?=\s|$)",
        re.IGNORECASE,
    )


def normalize_command(
    command: str,
    binaries: Iterable[str] = DEFAULT_NORMALIZE_BINARIES,
) -> str:
    """
    Rewrite an absolute-path invocation at the start of a command.

    `/usr/bin/rm -rf x` becomes `rm -rf x`. Only the first token is touched;
    paths later in the string (arguments, or a binary after `sudo`) are
    returned byte-for-byte.
    """
    names = tuple(b for b in binaries if b)
    if not command or not names:
        return command
    return _leading_path_pattern(names).sub(r"\1\2", command, count=1)
