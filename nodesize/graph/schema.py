"""Node model for the document-link graph.

A node is one document, identified by a stable path-like key such as
``Projects/Plan.md``. Its frontmatter is carried as a loosely-typed
metadata mapping; the helpers here turn the parts the sizing core cares
about (manual size, tags) into typed values.
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import Annotated, Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger("nodesize.graph.schema")

MANUAL_SIZE_KEY = "node_size"
DECLARED_TAG_KEYS = ("tags", "tag")

_TAG_SPLIT = re.compile(r"[,\s]+")


def strip_hash(tag: str) -> str:
    """Remove a single leading ``#`` from a tag."""
    return tag[1:] if tag.startswith("#") else tag


def split_tag_value(value: Any) -> List[str]:
    """Normalize a declared ``tags`` value into a list of bare tags.

    Accepts a list (one tag per entry) or a string delimited by commas
    and/or whitespace. Leading ``#`` characters are stripped and empty
    entries dropped.

    Examples:
        >>> split_tag_value("#project, draft  #idea")
        ['project', 'draft', 'idea']
        >>> split_tag_value(["#a", "b"])
        ['a', 'b']
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = _TAG_SPLIT.split(value)
    elif isinstance(value, (list, tuple, set)):
        parts = [str(item).strip() for item in value if item is not None]
    else:
        return []
    return [strip_hash(part) for part in parts if strip_hash(part)]


class NodeSpec(BaseModel):
    """Structured representation of a document node."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: Annotated[str, Field(..., min_length=1, description="Path-like node key")]
    links: Annotated[
        List[str],
        Field(default_factory=list, description="Outgoing link target keys"),
    ]
    metadata: Annotated[
        Dict[str, Any],
        Field(default_factory=dict, description="Frontmatter key/value pairs"),
    ]
    inline_tags: Annotated[
        List[str],
        Field(
            default_factory=list,
            description="Tags found in the document body (suggestions only)",
        ),
    ]

    @field_validator("key")
    @classmethod
    def normalize_key(cls, v: str) -> str:
        """Use forward slashes and no leading slash."""
        return v.replace("\\", "/").lstrip("/")

    @field_validator("inline_tags")
    @classmethod
    def normalize_inline_tags(cls, v: List[str]) -> List[str]:
        """Strip ``#`` from body tags."""
        return [strip_hash(tag) for tag in v if strip_hash(tag)]

    @property
    def title(self) -> str:
        """Bare title: key without directory and without extension."""
        return PurePosixPath(self.key).stem

    @property
    def folder(self) -> str:
        """Parent folder of the node ('' for the vault root)."""
        parent = str(PurePosixPath(self.key).parent)
        return "" if parent == "." else parent

    @property
    def manual_size(self) -> Optional[float]:
        """Manually authored size, or None when absent.

        Presence is decided by defined-ness, so ``node_size: 0`` is an
        explicit zero-size override. Booleans and non-numeric strings are
        not sizes and are treated as absent.
        """
        raw = self.metadata.get(MANUAL_SIZE_KEY)
        if raw is None or isinstance(raw, bool):
            if isinstance(raw, bool):
                logger.debug("Ignoring boolean %s on %s", MANUAL_SIZE_KEY, self.key)
            return None
        if isinstance(raw, (int, float)):
            return float(raw)
        try:
            return float(str(raw).strip())
        except ValueError:
            logger.debug(
                "Ignoring non-numeric %s=%r on %s", MANUAL_SIZE_KEY, raw, self.key
            )
            return None

    @property
    def declared_tags(self) -> List[str]:
        """Tags listed under the ``tags``/``tag`` frontmatter fields."""
        tags: List[str] = []
        for field in DECLARED_TAG_KEYS:
            tags.extend(split_tag_value(self.metadata.get(field)))
        return tags

    @property
    def implicit_tags(self) -> List[str]:
        """Tags inferred from other fields whose string value starts with ``#``."""
        return [
            strip_hash(value)
            for field, value in self.metadata.items()
            if field not in DECLARED_TAG_KEYS
            and isinstance(value, str)
            and value.startswith("#")
            and strip_hash(value)
        ]

    @property
    def effective_tags(self) -> FrozenSet[str]:
        """Tag set used by exclusion rules."""
        return frozenset(self.declared_tags) | frozenset(self.implicit_tags)

    @property
    def all_tags(self) -> FrozenSet[str]:
        """Declared and body tags; what the tag suggestions offer."""
        return frozenset(self.declared_tags) | frozenset(self.inline_tags)
