"""
News configuration models: one set's inclusion of one definition
"""

from typing import Any, ClassVar, Dict, Optional, Type
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from newsreader.core.exceptions import ValidationError

from .base import BaseModel
from .definition import (
    DefinitionType,
    NewsDefinition,
    PredefinedNewsDefinition,
    UserDefinedNewsDefinition,
)


class NewsConfiguration(BaseModel):
    """Per-set subscription to a news definition with per-user display flags"""
    __tablename__ = "news_configurations"

    configuration_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Variant discriminator: predefined or user_defined"
    )
    news_definition_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("news_definitions.id"),
        nullable=False,
        index=True,
        comment="Definition this configuration subscribes to"
    )
    news_set_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("news_sets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning news set"
    )
    displayed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Whether the feed appears in the rendered list"
    )
    visible_only: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Whether the feed participates in visibility-restricted listings"
    )
    subscribe_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="External subscriber identifier"
    )
    preferences: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Per-user overrides for the feed adapter"
    )

    # Relationships
    news_definition: Mapped[NewsDefinition] = relationship(
        NewsDefinition,
        lazy="selectin",
    )
    news_set: Mapped["NewsSet"] = relationship(
        "NewsSet",
        back_populates="configurations",
        lazy="selectin",
    )

    variant: ClassVar[DefinitionType]
    definition_class: ClassVar[Type[NewsDefinition]] = NewsDefinition

    __mapper_args__ = {
        "polymorphic_on": "configuration_type",
    }

    __table_args__ = (
        UniqueConstraint("news_set_id", "news_definition_id", name="uq_news_configurations_set_definition"),
        Index("idx_news_configurations_subscriber", "subscribe_id", "displayed"),
    )

    @validates("news_definition")
    def validate_news_definition(self, key, definition):
        """A configuration may only wrap a definition of the same variant"""
        if definition is not None and not isinstance(definition, self.definition_class):
            raise ValidationError(
                f"{type(self).__name__} cannot reference {type(definition).__name__}"
            )
        return definition

    @property
    def is_predefined(self) -> bool:
        return self.variant is DefinitionType.PREDEFINED

    @property
    def definition_id(self) -> Optional[UUID]:
        """Id of the referenced definition, also for not-yet-flushed configurations"""
        if self.news_definition is not None:
            return self.news_definition.id
        return self.news_definition_id

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(id={self.id}, set_id={self.news_set_id}, "
            f"definition_id={self.news_definition_id}, displayed={self.displayed})>"
        )


class PredefinedNewsConfiguration(NewsConfiguration):
    """Configuration wrapping a system-provided definition"""

    variant = DefinitionType.PREDEFINED
    definition_class = PredefinedNewsDefinition

    __mapper_args__ = {
        "polymorphic_identity": DefinitionType.PREDEFINED.value,
    }


class UserDefinedNewsConfiguration(NewsConfiguration):
    """Configuration wrapping a user-authored definition"""

    variant = DefinitionType.USER_DEFINED
    definition_class = UserDefinedNewsDefinition

    __mapper_args__ = {
        "polymorphic_identity": DefinitionType.USER_DEFINED.value,
    }
