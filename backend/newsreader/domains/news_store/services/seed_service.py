"""
Helpers for loading predefined news definitions from YAML/JSON seed files.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import yaml
from loguru import logger
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from newsreader.core.exceptions import ValidationError
from newsreader.models import PredefinedDefinitionSchema, PredefinedNewsDefinition

from ..repositories import DefinitionRepository


def load_seed_file(path: Union[str, Path]) -> List[PredefinedDefinitionSchema]:
    """
    Parse a seed file into validated definition entries.

    The file holds a top-level ``definitions`` list. Entries that fail
    validation are skipped with a warning; an unreadable file or a missing
    list is an error.
    """
    seed_file = Path(path)
    if not seed_file.exists():
        raise ValidationError(f"Seed file {seed_file} not found")

    with seed_file.open("r", encoding="utf-8") as handle:
        if seed_file.suffix in {".yml", ".yaml"}:
            data = yaml.safe_load(handle) or {}
        else:
            data = json.load(handle)

    entries = data.get("definitions") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValidationError(f"Seed file {seed_file} must contain a 'definitions' list")

    return parse_seed_entries(entries)


def parse_seed_entries(entries: Iterable[Dict[str, Any]]) -> List[PredefinedDefinitionSchema]:
    parsed: List[PredefinedDefinitionSchema] = []
    seen = set()
    for entry in entries:
        try:
            schema = PredefinedDefinitionSchema(**entry)
        except (SchemaValidationError, TypeError) as exc:
            logger.warning(f"Invalid predefined definition entry {entry!r}: {exc}")
            continue
        if schema.name in seen:
            logger.warning(f"Duplicate predefined definition '{schema.name}' in seed data; keeping the first")
            continue
        seen.add(schema.name)
        parsed.append(schema)
    return parsed


@dataclass
class PredefinedDefinitionSeeder:
    session: AsyncSession

    def __post_init__(self) -> None:
        self._repo = DefinitionRepository(self.session)

    async def seed(self, entries: Iterable[PredefinedDefinitionSchema]) -> List[PredefinedNewsDefinition]:
        """Insert new definitions and update existing ones, matched by name."""
        stored: List[PredefinedNewsDefinition] = []
        created = 0
        for entry in entries:
            definition = await self._repo.fetch_predefined_by_name(entry.name)
            if definition is None:
                definition = PredefinedNewsDefinition(name=entry.name)
                created += 1
            definition.class_name = entry.class_name
            definition.parameters = entry.to_parameters()
            definition.default_roles = entry.default_roles
            stored.append(await self._repo.add(definition))

        logger.info(f"Seeded {len(stored)} predefined definition(s), {created} new")
        return stored
