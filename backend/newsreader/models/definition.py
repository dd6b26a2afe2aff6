"""
News definition models: reusable descriptions of a feed source
"""

import enum
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Set
from uuid import UUID

from pydantic import Field, field_validator
from sqlalchemy import JSON, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BaseModel, BaseSchema


class DefinitionType(str, enum.Enum):
    """Discriminator shared by definitions and configurations"""
    PREDEFINED = "predefined"
    USER_DEFINED = "user_defined"


class NewsDefinition(BaseModel):
    """Feed source description, either system-curated or user-authored"""
    __tablename__ = "news_definitions"

    definition_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Variant discriminator: predefined or user_defined"
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name of the feed"
    )
    class_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="rss",
        comment="Identifier of the adapter able to fetch this feed"
    )
    parameters: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Adapter parameters such as the feed URL"
    )

    __mapper_args__ = {
        "polymorphic_on": "definition_type",
    }

    __table_args__ = (
        Index(
            "uq_news_definitions_predefined_name",
            "name",
            unique=True,
            postgresql_where=text("definition_type = 'predefined'"),
            sqlite_where=text("definition_type = 'predefined'"),
        ),
        Index("idx_news_definitions_type_name", "definition_type", "name"),
    )

    variant: ClassVar[DefinitionType]

    @property
    def is_predefined(self) -> bool:
        return self.variant is DefinitionType.PREDEFINED

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, name={self.name})>"


class DefinitionRole(Base):
    """Role granting default visibility of a predefined definition"""
    __tablename__ = "news_definition_roles"

    definition_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("news_definitions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_name: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )

    def __repr__(self) -> str:
        return f"<DefinitionRole(definition_id={self.definition_id}, role={self.role_name})>"


class PredefinedNewsDefinition(NewsDefinition):
    """System-provided definition, shown by default to users holding one of its roles"""

    variant = DefinitionType.PREDEFINED

    role_entries: Mapped[List[DefinitionRole]] = relationship(
        DefinitionRole,
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=DefinitionRole.role_name,
    )

    __mapper_args__ = {
        "polymorphic_identity": DefinitionType.PREDEFINED.value,
    }

    @property
    def default_roles(self) -> Set[str]:
        return {entry.role_name for entry in self.role_entries}

    @default_roles.setter
    def default_roles(self, roles: Iterable[str]) -> None:
        wanted = {role.strip() for role in roles if role and role.strip()}
        kept = [entry for entry in self.role_entries if entry.role_name in wanted]
        existing = {entry.role_name for entry in kept}
        self.role_entries = kept + [
            DefinitionRole(role_name=role) for role in sorted(wanted - existing)
        ]

    def add_role(self, role: str) -> None:
        self.default_roles = self.default_roles | {role}

    def remove_role(self, role: str) -> None:
        self.default_roles = self.default_roles - {role}


class UserDefinedNewsDefinition(NewsDefinition):
    """Feed definition authored by an end user"""

    variant = DefinitionType.USER_DEFINED

    __mapper_args__ = {
        "polymorphic_identity": DefinitionType.USER_DEFINED.value,
    }


# Pydantic Schemas
class PredefinedDefinitionSchema(BaseSchema):
    """Schema validating predefined definitions loaded from seed files"""

    name: str = Field(..., min_length=1, max_length=255, description="Display name of the feed")
    class_name: str = Field("rss", min_length=1, max_length=255, description="Feed adapter identifier")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Adapter parameters")
    default_roles: Set[str] = Field(default_factory=set, description="Roles that see this feed by default")
    url: Optional[str] = Field(None, description="Shortcut for parameters['url']")

    @field_validator('default_roles', mode='before')
    @classmethod
    def validate_default_roles(cls, v):
        """Accept a comma-separated string as well as a list"""
        if v is None:
            return set()
        if isinstance(v, str):
            return {role.strip() for role in v.split(',') if role.strip()}
        return v

    def to_parameters(self) -> Dict[str, Any]:
        parameters = dict(self.parameters)
        if self.url and "url" not in parameters:
            parameters["url"] = self.url
        return parameters
