"""
Name resolution: symbol name -> defining file.

Follows the autoload convention: a file at <load_path>/sales/order_item.rb
defines Sales::OrderItem. The index of every file under the load paths
is built on first use.

Lookup is lexical. Resolving "Order" from inside "Sales::Admin" tries
    Sales::Admin::Order, Sales::Order, Order
in that order. A leading "::" skips the lexical scopes. A name that is
not a file of its own but lives inside one (Sales::Order::STATUSES) is
attributed to the nearest enclosing file (Sales::Order).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from packguard.inflector import Inflector


logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".rb",)


@dataclass(frozen=True)
class ResolvedSymbol:
    """Fully qualified name and root-relative defining file."""

    name: str
    location: str


class ConstantResolver:
    def __init__(
        self,
        root_path: Path,
        load_paths: Sequence[str],
        inflector: Inflector,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ):
        self.root_path = Path(root_path)
        self.load_paths = list(load_paths)
        self.inflector = inflector
        self.extensions = tuple(extensions)
        self._file_map: Optional[Dict[str, str]] = None
        self._namespaces: Optional[Set[str]] = None

    @property
    def file_map(self) -> Dict[str, str]:
        """Qualified symbol name -> root-relative file. First load path wins."""
        if self._file_map is None:
            self._file_map = self._build_file_map()
        return self._file_map

    def _build_file_map(self) -> Dict[str, str]:
        file_map: Dict[str, str] = {}
        for load_path in self.load_paths:
            base = self.root_path / load_path
            if not base.is_dir():
                logger.debug("Load path %s does not exist", base)
                continue
            for dirpath, _dirnames, filenames in os.walk(base):
                for filename in sorted(filenames):
                    stem, ext = os.path.splitext(filename)
                    if ext not in self.extensions:
                        continue
                    path = Path(dirpath) / filename
                    relative = path.relative_to(base).with_suffix("").as_posix()
                    name = self.inflector.camelize(relative)
                    file_map.setdefault(name, path.relative_to(self.root_path).as_posix())
        logger.debug("Indexed %d symbols under %d load paths", len(file_map), len(self.load_paths))
        return file_map

    @property
    def namespaces(self) -> Set[str]:
        """Every qualified name that is a file or a prefix of one."""
        self.build_index()
        return self._namespaces

    def resolve(self, symbol_name: str, namespace_path: str = "") -> Optional[ResolvedSymbol]:
        """
        Locate the file defining `symbol_name` as seen from `namespace_path`.

        Returns None for names not defined under any load path.
        """
        if symbol_name.startswith("::"):
            symbol_name = symbol_name[2:]
            scopes: List[List[str]] = [[]]
        else:
            nesting = [s for s in namespace_path.split("::") if s]
            scopes = [nesting[:depth] for depth in range(len(nesting), -1, -1)]

        segments = [s for s in symbol_name.split("::") if s]
        if not segments:
            return None

        for scope in scopes:
            # The first segment picks the lexical scope; the rest is looked
            # up inside it and never escapes it.
            if "::".join(scope + segments[:1]) not in self.namespaces:
                continue
            qualified = scope + segments
            for end in range(len(qualified), len(scope), -1):
                location = self.file_map.get("::".join(qualified[:end]))
                if location is not None:
                    return ResolvedSymbol(name="::".join(qualified), location=location)
            return None
        return None

    def build_index(self) -> None:
        """Build the lookup tables now rather than on first resolve."""
        if self._namespaces is not None:
            return
        namespaces: Set[str] = set()
        for name in self.file_map:
            segments = name.split("::")
            for i in range(1, len(segments) + 1):
                namespaces.add("::".join(segments[:i]))
        self._namespaces = namespaces
