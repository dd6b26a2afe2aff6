from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set
from uuid import UUID

from newsreader.models import PredefinedNewsDefinition


@dataclass
class RolePartition:
    """Predefined definitions split by presence in a set and role overlap."""

    subscribed: List[PredefinedNewsDefinition] = field(default_factory=list)
    eligible: List[PredefinedNewsDefinition] = field(default_factory=list)
    hidden: List[PredefinedNewsDefinition] = field(default_factory=list)

    @staticmethod
    def _ids(definitions: List[PredefinedNewsDefinition]) -> Set[UUID]:
        return {definition.id for definition in definitions}

    @property
    def subscribed_ids(self) -> Set[UUID]:
        return self._ids(self.subscribed)

    @property
    def eligible_ids(self) -> Set[UUID]:
        return self._ids(self.eligible)

    @property
    def hidden_ids(self) -> Set[UUID]:
        return self._ids(self.hidden)
