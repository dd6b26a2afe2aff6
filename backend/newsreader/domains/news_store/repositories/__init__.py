"""
Repository layer for the news store domain.

Repositories encapsulate database access and SQLAlchemy queries. Higher layers
should depend on repository interfaces rather than raw sessions.
"""

from .configuration_repository import ConfigurationFilters, ConfigurationRepository  # noqa: F401
from .definition_repository import DefinitionRepository  # noqa: F401
from .set_repository import NewsSetRepository  # noqa: F401
