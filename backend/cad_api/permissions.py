"""Permission names and the permission check used across the API."""
from enum import Enum
from typing import Callable, Iterable, Union

from cad_api.models.user import User, UserRank


class Permission(str, Enum):
    """Fine-grained permissions assignable to a user."""
    LEO = "Leo"
    DISPATCH = "Dispatch"
    EMS_FD = "EmsFd"
    MANAGE_WARRANTS = "ManageWarrants"
    MANAGE_COURTHOUSE_WARRANTS = "ManageCourthouseWarrants"
    MANAGE_NAME_CHANGE_REQUESTS = "ManageNameChangeRequests"
    MANAGE_CITIZENS = "ManageCitizens"
    MANAGE_VALUES = "ManageValues"
    MANAGE_CAD_SETTINGS = "ManageCadSettings"


DEFAULT_LEO_PERMISSIONS = [Permission.LEO, Permission.MANAGE_WARRANTS]

Fallback = Union[bool, Callable[[User], bool]]


def is_admin(user: User) -> bool:
    return user.rank in (UserRank.OWNER, UserRank.ADMIN)


def has_permission(
    user: User,
    permissions_to_check: Iterable[Permission],
    fallback: Fallback = False,
) -> bool:
    """
    Check whether a user holds any of the given permissions.

    Owners always pass. Users without any assigned permissions are judged
    by ``fallback`` instead, which is either a bool or a callable taking
    the user (typically one of the legacy ``is_leo``/``is_dispatch`` flags).
    """
    if user is None:
        return False

    if user.rank == UserRank.OWNER:
        return True

    user_permissions = set(user.permissions or [])
    if not user_permissions:
        return fallback(user) if callable(fallback) else bool(fallback)

    return any(Permission(p).value in user_permissions for p in permissions_to_check)
