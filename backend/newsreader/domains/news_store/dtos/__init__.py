from .partition import RolePartition  # noqa: F401
