"""
Symbol-candidate inspectors.

An inspector looks at one source line and reports the symbol names it
believes are referenced there, with their column. Inspectors work on
tokens, not on a syntax tree: they are deliberately cheap heuristics and
the FileProcessor combines their results in column order.

    ConstantNameInspector  - qualified names such as Sales::Order
    AssociationInspector   - association macros such as has_many :orders
"""

import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from packguard.inflector import Inflector


_STRING_RE = re.compile(r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'")
_CONSTANT_RE = re.compile(r"(?<![\w:.])(?:::)?[A-Z]\w*(?:::[A-Z]\w*)*")
_DEFINITION_RE = re.compile(r"^\s*(?:module|class)\s+((?:::)?[A-Z]\w*(?:::[A-Z]\w*)*)")
_CLASS_NAME_RE = re.compile(r"class_name:\s*[\"']((?:::)?[A-Z][\w:]*)[\"']")

DEFAULT_ASSOCIATIONS = ("belongs_to", "has_many", "has_one", "has_and_belongs_to_many")


def strip_strings_and_comments(line: str) -> str:
    """Blank out string literals and trailing comments, keeping columns."""
    code = _STRING_RE.sub(lambda m: " " * len(m.group(0)), line)
    hash_at = code.find("#")
    if hash_at != -1:
        code = code[:hash_at]
    return code


def defined_name(line: str) -> Optional[str]:
    """Name opened by a `module X` / `class X` line, if any."""
    match = _DEFINITION_RE.match(strip_strings_and_comments(line))
    return match.group(1) if match else None


class SymbolInspector(ABC):
    @abstractmethod
    def symbol_names(self, line: str) -> List[Tuple[int, str]]:
        """(column, symbol name) pairs referenced on `line`."""
        ...


class ConstantNameInspector(SymbolInspector):
    """
    Reports every capitalized, possibly namespaced name on a line,
    except the name being defined by a module/class line.
    """

    def symbol_names(self, line: str) -> List[Tuple[int, str]]:
        code = strip_strings_and_comments(line)
        definition = _DEFINITION_RE.match(code)
        skip_until = definition.end(1) if definition else -1

        names = []
        for match in _CONSTANT_RE.finditer(code):
            if match.start() < skip_until:
                continue
            names.append((match.start(), match.group(0)))
        return names


class AssociationInspector(SymbolInspector):
    """
    Reports the model referenced by association macros.

    `has_many :order_items` references OrderItem; an explicit
    `class_name: "Sales::Item"` option wins over the inferred name.
    """

    def __init__(self, inflector: Inflector, custom_associations: Iterable[str] = ()):
        self.inflector = inflector
        macros = list(DEFAULT_ASSOCIATIONS) + [a for a in custom_associations if a not in DEFAULT_ASSOCIATIONS]
        self._macro_re = re.compile(
            r"^\s*(?:" + "|".join(re.escape(m) for m in macros) + r")\s*\(?\s*:(\w+)"
        )

    def symbol_names(self, line: str) -> List[Tuple[int, str]]:
        code = strip_strings_and_comments(line)
        match = self._macro_re.match(code)
        if not match:
            return []

        explicit = _CLASS_NAME_RE.search(line, match.end())
        if explicit:
            return [(match.start(1), explicit.group(1))]
        return [(match.start(1), self.inflector.camelize(self.inflector.singularize(match.group(1))))]
