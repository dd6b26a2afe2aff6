"""
Service layer for the news store domain.
"""

from .initializer_service import RoleBasedInitializer  # noqa: F401
from .seed_service import PredefinedDefinitionSeeder, load_seed_file, parse_seed_entries  # noqa: F401
