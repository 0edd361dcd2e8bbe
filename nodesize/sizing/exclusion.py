"""Exclusion rules deciding whether a node takes part in dynamic sizing.

Three independent predicates are OR-ed together: folder prefix, title
(exact or ``/regex/``) and tag. They are evaluated in that order because
the first two need nothing but the key.
"""

import logging
import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Pattern, Tuple

from nodesize.config.schema import SizingConfig
from nodesize.graph.schema import NodeSpec

logger = logging.getLogger("nodesize.sizing.exclusion")


@dataclass(frozen=True)
class InvalidTitlePattern:
    """A ``/regex/`` title rule that failed to compile.

    Attributes:
        pattern: The configured entry, delimiters included.
        error: Message reported by the regex engine.
    """

    pattern: str
    error: str

    def __str__(self) -> str:
        return f"Invalid title pattern {self.pattern}: {self.error}"


def folder_prefix(folder: str) -> str:
    """Return ``folder`` with a trailing path separator."""
    return folder if folder.endswith("/") else folder + "/"


def is_regex_rule(rule: str) -> bool:
    """Check whether a title rule is a ``/…/`` delimited regex."""
    return len(rule) >= 2 and rule.startswith("/") and rule.endswith("/")


class ExclusionEvaluator:
    """Compiled exclusion rules for one configuration snapshot.

    Regex title rules are compiled once. A rule that fails to compile is
    reported through the log and kept in `pattern_errors`; it never matches
    and does not prevent the remaining rules from being applied.
    """

    def __init__(self, config: SizingConfig) -> None:
        """Compile the rules of ``config``.

        Args:
            config: Configuration snapshot providing the exclusion lists.
        """
        self._prefixes: Tuple[str, ...] = tuple(
            folder_prefix(folder.lstrip("/")) for folder in config.exclude_folders
        )
        self._tags: FrozenSet[str] = frozenset(config.exclude_tags)
        self._exact_titles: FrozenSet[str] = frozenset(
            rule for rule in config.exclude_titles if not is_regex_rule(rule)
        )
        self._title_patterns: List[Pattern[str]] = []
        self.pattern_errors: List[InvalidTitlePattern] = []

        for rule in config.exclude_titles:
            if not is_regex_rule(rule):
                continue
            try:
                self._title_patterns.append(re.compile(rule[1:-1]))
            except re.error as exc:
                invalid = InvalidTitlePattern(pattern=rule, error=str(exc))
                self.pattern_errors.append(invalid)
                logger.error("%s; rule ignored", invalid)

    @property
    def has_rules(self) -> bool:
        """Whether any exclusion rule is configured."""
        return bool(
            self._prefixes or self._tags or self._exact_titles or self._title_patterns
        )

    def excluded_by_folder(self, node: NodeSpec) -> bool:
        return node.key.startswith(self._prefixes) if self._prefixes else False

    def excluded_by_title(self, node: NodeSpec) -> bool:
        title = node.title
        if title in self._exact_titles:
            return True
        return any(pattern.search(title) for pattern in self._title_patterns)

    def excluded_by_tag(self, node: NodeSpec) -> bool:
        if not self._tags:
            return False
        return not self._tags.isdisjoint(node.effective_tags)

    def is_excluded(self, node: Optional[NodeSpec]) -> bool:
        """Decide whether ``node`` is left out of dynamic sizing.

        Args:
            node: Node to check. None (a missing node) is never excluded;
                callers handle existence separately.

        Returns:
            bool: True when any folder, title or tag rule matches.
        """
        if node is None:
            return False
        return (
            self.excluded_by_folder(node)
            or self.excluded_by_title(node)
            or self.excluded_by_tag(node)
        )

    def reason(self, node: Optional[NodeSpec]) -> Optional[str]:
        """Name of the first matching rule kind, for diagnostics."""
        if node is None:
            return None
        if self.excluded_by_folder(node):
            return "folder"
        if self.excluded_by_title(node):
            return "title"
        if self.excluded_by_tag(node):
            return "tag"
        return None


def is_excluded(node: Optional[NodeSpec], config: SizingConfig) -> bool:
    """One-shot exclusion check.

    Compiles the rules on every call; prefer `ExclusionEvaluator` when
    checking many nodes against the same snapshot.
    """
    return ExclusionEvaluator(config).is_excluded(node)
