"""
Glob patterns for step-rule constraints.

Only one wildcard exists: "*" matches any run of characters (including an
empty one). Everything else is literal, so regex metacharacters in the
pattern text ("." in "/items.json", "+" in "c++") never leak into the regex.
"""

import re
from functools import lru_cache


def tokenize(pattern: str) -> list[str]:
    """Split a glob into literal runs and "*" tokens. Consecutive stars collapse."""
    tokens: list[str] = []
    literal: list[str] = []
    for ch in pattern:
        if ch == "*":
            if literal:
                tokens.append("".join(literal))
                literal = []
            if not tokens or tokens[-1] != "*":
                tokens.append("*")
        else:
            literal.append(ch)
    if literal:
        tokens.append("".join(literal))
    return tokens


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> re.Pattern:
    body = "".join(".*" if tok == "*" else re.escape(tok) for tok in tokenize(pattern))
    return re.compile(f"^{body}$", re.DOTALL)


def glob_match(pattern: str, value: str) -> bool:
    return compile_glob(pattern).match(value) is not None
