"""
Extended glob support for include/exclude patterns.

Adds brace alternation on top of the stdlib fnmatch/glob semantics:
    - "{bin,tmp}/**/*" expands to "bin/**/*" and "tmp/**/*"
    - "*" and "**" both match across "/" when matching (not when globbing)
    - "[abc]" and "[!abc]" character classes are passed through to fnmatch
"""

from __future__ import annotations

import glob
import os
from fnmatch import fnmatchcase
from typing import Iterable, List

from packguard.errors import ConfigurationError


def validate_glob(pattern: str) -> None:
    """Raise ConfigurationError unless braces and brackets in `pattern` balance."""
    if not isinstance(pattern, str) or not pattern:
        raise ConfigurationError(f"Glob must be a non-empty string, got {pattern!r}")

    depth = 0
    in_class = False
    for ch in pattern:
        if in_class:
            if ch == "]":
                in_class = False
            continue
        if ch == "[":
            in_class = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise ConfigurationError(f"Unbalanced '}}' in glob: {pattern}")
    if in_class:
        raise ConfigurationError(f"Unterminated character class in glob: {pattern}")
    if depth != 0:
        raise ConfigurationError(f"Unbalanced '{{' in glob: {pattern}")


def expand_braces(pattern: str) -> List[str]:
    """
    Expand the first (outermost) brace group and recurse.

    "a/{b,c{d,e}}/f" -> ["a/b/f", "a/cd/f", "a/ce/f"]
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    alternatives: List[str] = []
    current = start + 1
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                alternatives.append(pattern[current:i])
                prefix, suffix = pattern[:start], pattern[i + 1:]
                expanded: List[str] = []
                for alt in alternatives:
                    expanded.extend(expand_braces(prefix + alt + suffix))
                return expanded
        elif ch == "," and depth == 1:
            alternatives.append(pattern[current:i])
            current = i + 1

    # No closing brace: treat "{" literally
    return [pattern]


def extglob_match(pattern: str, path: str) -> bool:
    """True if `path` matches `pattern` under extended glob semantics."""
    return any(fnmatchcase(path, p) for p in expand_braces(pattern))


def any_match(patterns: Iterable[str], path: str) -> bool:
    return any(extglob_match(p, path) for p in patterns)


def expand(root: str, pattern: str) -> List[str]:
    """
    Expand `pattern` relative to `root` against the filesystem.
    `root` is taken literally, even if it contains glob characters.

    Results keep glob order per brace alternative, without duplicates.
    """
    seen = set()
    results: List[str] = []
    base = glob.escape(root)
    for alt in expand_braces(pattern):
        for path in sorted(glob.glob(os.path.join(base, alt), recursive=True)):
            if path not in seen:
                seen.add(path)
                results.append(path)
    return results
