"""
Types shared by the note content pipeline. All of these are plain values: nothing
in the pipeline keeps a live handle on a note between calls.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

FrontmatterValue = bool | int | float | str
"""A typed scalar in a frontmatter block."""

Frontmatter = Dict[str, FrontmatterValue]
"""Frontmatter keys and values. Dicts keep insertion order, which is the write order."""


@dataclass(frozen=True)
class NoteDocument:
    """
    The text of a note split into its frontmatter and its Markdown body. The body is
    kept byte for byte.
    """

    frontmatter: Frontmatter = field(default_factory=dict)
    body: str = ""


class Direction(Enum):
    """
    Reading direction of a line of text.
    """

    ltr = "ltr"
    rtl = "rtl"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class ListContinuation:
    """
    Replacement text for the editor buffer after a list marker is inserted, and where
    the cursor should go.
    """

    modified_text: str
    cursor_should_move: bool
    new_cursor_pos: int


@dataclass(frozen=True)
class EditResult:
    text: str
    cursor: int


class Domain(Enum):
    """
    Cognitive domain a note belongs to, kept in the `domain` frontmatter key.
    """

    action = "action"
    knowledge = "knowledge"
    insight = "insight"
    experience = "experience"
    person = "person"

    @classmethod
    def parse(cls, value: object) -> Optional["Domain"]:
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return DOMAIN_LABELS[self]

    def __str__(self):
        return self.value


DOMAIN_LABELS = {
    Domain.action: "לעשות",
    Domain.knowledge: "לדעת",
    Domain.insight: "תובנה",
    Domain.experience: "חוויה",
    Domain.person: "אדם",
}


@dataclass
class Note:
    id: str
    title: str
    content: str
    file_path: Path
    created_at: datetime
    updated_at: datetime
    pinned: bool = False
    domain: Optional[Domain] = None
