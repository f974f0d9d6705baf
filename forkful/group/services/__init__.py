"""Group services."""

from .group_service import GroupService
from .membership import Membership

__all__ = ["GroupService", "Membership"]
