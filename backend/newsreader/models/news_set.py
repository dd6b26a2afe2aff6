"""
News set model: the aggregate a user manages
"""

from typing import List, Set, TYPE_CHECKING
from uuid import UUID

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .configuration import NewsConfiguration
    from .definition import NewsDefinition


class NewsSet(BaseModel):
    """Named collection of feed subscriptions owned by one user"""
    __tablename__ = "news_sets"

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Owner of the set"
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Set name, unique per user"
    )

    # Relationships
    configurations: Mapped[List["NewsConfiguration"]] = relationship(
        "NewsConfiguration",
        back_populates="news_set",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_news_sets_user_name"),
    )

    def add_configuration(self, configuration: "NewsConfiguration") -> None:
        if configuration not in self.configurations:
            self.configurations.append(configuration)

    def remove_configuration(self, configuration: "NewsConfiguration") -> None:
        if configuration in self.configurations:
            self.configurations.remove(configuration)

    def contains_definition(self, definition: "NewsDefinition") -> bool:
        """
        Whether a configuration of this set already references ``definition``.

        Unflushed definitions have no id yet and are matched by identity.
        """
        for config in self.configurations:
            if config.news_definition is definition:
                return True
            if definition.id is not None and config.definition_id == definition.id:
                return True
        return False

    @property
    def definition_ids(self) -> Set[UUID]:
        """Ids of every definition referenced by the in-memory collection"""
        return {
            config.definition_id
            for config in self.configurations
            if config.definition_id is not None
        }

    def __repr__(self) -> str:
        return f"<NewsSet(id={self.id}, user_id={self.user_id}, name={self.name})>"
