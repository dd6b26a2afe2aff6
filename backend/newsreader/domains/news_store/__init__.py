"""
News store domain package.

Provides the persistence gateway for news sets, definitions and
configurations together with the role-based initializer that populates sets
with predefined defaults.
"""

from .facade import NewsStoreFacade  # noqa: F401
from .services import RoleBasedInitializer  # noqa: F401
from .repositories import (  # noqa: F401
    ConfigurationRepository,
    DefinitionRepository,
    NewsSetRepository,
)
