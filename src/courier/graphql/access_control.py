"""
Shared access control logic for GraphQL resolvers
"""

from typing import TYPE_CHECKING, Any

import strawberry
from strawberry.permission import BasePermission

from ..errors import ForbiddenError
from .context import RequestContext

if TYPE_CHECKING:
    from ..auth.tokens import Me

ADMIN_ROLE = "ADMIN"


def get_me_from_info(info: strawberry.Info) -> "Me | None":
    """Return the verified token claim, or None for anonymous and subscription contexts."""
    context = info.context
    if isinstance(context, RequestContext):
        return context.me
    return None


def require_me(info: strawberry.Info) -> "Me":
    """Return the verified token claim or raise ForbiddenError."""
    me = get_me_from_info(info)
    if me is None:
        raise ForbiddenError(IsAuthenticated.message)
    return me


class IsAuthenticated(BasePermission):
    message = "Not authenticated as user."
    error_extensions = {"code": "FORBIDDEN"}

    def has_permission(self, source: Any, info: strawberry.Info, **kwargs: Any) -> bool:
        return get_me_from_info(info) is not None


class IsAdmin(BasePermission):
    message = "Not authorized as admin."
    error_extensions = {"code": "FORBIDDEN"}

    def has_permission(self, source: Any, info: strawberry.Info, **kwargs: Any) -> bool:
        me = get_me_from_info(info)
        return me is not None and me.get("role") == ADMIN_ROLE
