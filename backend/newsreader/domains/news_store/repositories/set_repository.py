"""
Repository helpers for news sets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsreader.models import NewsSet


@dataclass
class NewsSetRepository:
    session: AsyncSession

    async def fetch_by_id(self, set_id: UUID) -> Optional[NewsSet]:
        return await self.session.get(NewsSet, set_id)

    async def fetch_by_name(self, user_id: str, name: str) -> Optional[NewsSet]:
        stmt = select(NewsSet).where(NewsSet.user_id == user_id, NewsSet.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> List[NewsSet]:
        stmt = select(NewsSet).where(NewsSet.user_id == user_id).order_by(NewsSet.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, news_set: NewsSet) -> NewsSet:
        self.session.add(news_set)
        await self.session.flush()
        await self.session.refresh(news_set)
        return news_set

    async def delete(self, news_set: NewsSet) -> None:
        await self.session.delete(news_set)
        await self.session.flush()
