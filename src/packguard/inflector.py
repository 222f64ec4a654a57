"""
Inflection capability used to map symbol names to file names.

The default English rules come from the `inflection` package. A codebase
can layer its own overrides on top of them with a YAML file:

    acronym:
      - GraphQL
    irregular:
      - [person, people]
    uncountable:
      - sheep
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import inflection
import yaml

from packguard.errors import ConfigurationError


class Inflector:
    def __init__(
        self,
        acronyms: Iterable[str] = (),
        irregulars: Sequence[Tuple[str, str]] = (),
        uncountables: Iterable[str] = (),
    ):
        self.acronyms: Dict[str, str] = {a.lower(): a for a in acronyms}
        self.singulars: Dict[str, str] = {p.lower(): s.lower() for s, p in irregulars}
        self.uncountables = {u.lower() for u in uncountables}

    @classmethod
    def from_file(cls, path: Optional[Path]) -> "Inflector":
        """Load overrides from `path`. A missing file means no overrides."""
        if path is None or not Path(path).exists():
            return cls()
        try:
            with Path(path).open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed inflections file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Inflections file {path} must be a mapping")

        irregulars: List[Tuple[str, str]] = []
        for pair in data.get("irregular") or []:
            if not (isinstance(pair, list) and len(pair) == 2):
                raise ConfigurationError(f"Irregular inflection must be a [singular, plural] pair, got {pair!r}")
            irregulars.append((pair[0], pair[1]))

        return cls(
            acronyms=data.get("acronym") or [],
            irregulars=irregulars,
            uncountables=data.get("uncountable") or [],
        )

    def camelize(self, term: str) -> str:
        """'sales/order_item' -> 'Sales::OrderItem'"""
        segments = []
        for segment in term.split("/"):
            words = [w for w in segment.split("_") if w]
            segments.append("".join(self.acronyms.get(w.lower()) or inflection.camelize(w) for w in words))
        return "::".join(segments)

    def singularize(self, word: str) -> str:
        lower = word.lower()
        if lower in self.uncountables:
            return word
        if lower in self.singulars:
            return self.singulars[lower]
        return inflection.singularize(word)
