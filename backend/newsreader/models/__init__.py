"""
Models package
"""

from .base import Base, BaseModel, BaseSchema
from .definition import (
    DefinitionRole,
    DefinitionType,
    NewsDefinition,
    PredefinedDefinitionSchema,
    PredefinedNewsDefinition,
    UserDefinedNewsDefinition,
)
from .news_set import NewsSet
from .configuration import (
    NewsConfiguration,
    PredefinedNewsConfiguration,
    UserDefinedNewsConfiguration,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseSchema",
    "DefinitionRole",
    "DefinitionType",
    "NewsDefinition",
    "PredefinedDefinitionSchema",
    "PredefinedNewsDefinition",
    "UserDefinedNewsDefinition",
    "NewsSet",
    "NewsConfiguration",
    "PredefinedNewsConfiguration",
    "UserDefinedNewsConfiguration",
]
