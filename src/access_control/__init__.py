"""Permission resolution and access-controlled dataset and team operations."""

from access_control.datasets import DatasetService
from access_control.resolver import PermissionResolver
from access_control.sharing import SharingService
from access_control.teams import TeamService

__all__ = ["DatasetService", "PermissionResolver", "SharingService", "TeamService"]
