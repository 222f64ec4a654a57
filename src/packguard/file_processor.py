"""
Extraction: source file -> ordered RawUsages.

Runs every inspector over every line and returns what they found in
source order (line, then column). Lexical nesting is followed from
`module X` / `class X` lines and the `end` at the same indentation, so
each usage carries the namespace it was written in.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from packguard.errors import FileProcessingError
from packguard.inspectors import SymbolInspector, defined_name, strip_strings_and_comments
from packguard.model import RawUsage, SourceLocation


logger = logging.getLogger(__name__)

_END_RE = re.compile(r"^(\s*)end\b")


class FileProcessor:
    def __init__(self, root_path: Path, inspectors: Sequence[SymbolInspector]):
        self.root_path = Path(root_path)
        self.inspectors = list(inspectors)

    def relative_path(self, file: Union[str, Path]) -> str:
        path = Path(file)
        if path.is_absolute():
            try:
                path = path.relative_to(self.root_path)
            except ValueError as e:
                raise FileProcessingError(str(file), f"not under {self.root_path}") from e
        return path.as_posix()

    def call(self, file: Union[str, Path]) -> List[RawUsage]:
        relative = self.relative_path(file)
        try:
            source = (self.root_path / relative).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise FileProcessingError(relative, str(e)) from e

        usages: List[RawUsage] = []
        # (indent, segments) for every open module/class
        nesting: List[Tuple[int, List[str]]] = []

        for lineno, line in enumerate(source.splitlines(), start=1):
            namespace_path = "::".join(s for _, segments in nesting for s in segments)

            found: List[Tuple[int, str]] = []
            for inspector in self.inspectors:
                found.extend(inspector.symbol_names(line))
            for _column, name in sorted(found, key=lambda item: item[0]):
                usages.append(RawUsage(
                    symbol_name=name,
                    location=SourceLocation(file=relative, line=lineno),
                    namespace_path=namespace_path,
                ))

            indent = len(line) - len(line.lstrip())
            opened = defined_name(line)
            if opened is not None and not re.search(r"\bend\s*$", strip_strings_and_comments(line)):
                nesting.append((indent, [s for s in opened.split("::") if s]))
            elif nesting and _END_RE.match(line) and indent == nesting[-1][0]:
                nesting.pop()

        logger.debug("Found %d symbol usages in %s", len(usages), relative)
        return usages

    __call__ = call
