"""Route table for the user resource.

Each entry binds a method and path to an ordered tuple of guards and a
terminal handler. Guards are registered as route dependencies in the order
they are listed, so ``protect`` always runs before any role check.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Tuple

from fastapi import APIRouter, Depends, status

from . import auth, users
from .models import Role
from .security import protect, restrict_to

Guard = Callable[..., Any]

admin_only = restrict_to(Role.ADMIN)
superadmin_only = restrict_to(Role.SUPERADMIN)


@dataclass(frozen=True)
class UserRoute:
    method: str
    path: str
    guards: Tuple[Guard, ...]
    handler: Callable[..., Any]
    access: str
    summary: str

    @property
    def is_protected(self) -> bool:
        return protect in self.guards

    def responses(self) -> Dict[int | str, Dict[str, Any]]:
        documented: Dict[int | str, Dict[str, Any]] = {}
        if self.is_protected:
            documented[status.HTTP_401_UNAUTHORIZED] = {"description": "Not authenticated"}
        if any(hasattr(guard, "allowed_roles") for guard in self.guards):
            documented[status.HTTP_403_FORBIDDEN] = {"description": "Insufficient role"}
        if "{user_id" in self.path or self.path.startswith("/profile"):
            documented[status.HTTP_404_NOT_FOUND] = {"description": "The user was not found"}
        return documented


USER_ID = "/{user_id:int}"

USER_ROUTES: Tuple[UserRoute, ...] = (
    UserRoute("GET", "/", (protect,), users.find_all_users, "authenticated", "Get all users"),
    UserRoute("POST", "/signup", (), users.create_user, "public", "Create a new user"),
    UserRoute(
        "PUT",
        "/profile/",
        (protect,),
        users.update_profile,
        "self",
        "Update the profile of the authenticated user",
    ),
    UserRoute(
        "DELETE",
        "/profile/",
        (protect,),
        users.delete_profile,
        "self",
        "Delete the profile of the authenticated user",
    ),
    UserRoute("GET", USER_ID, (protect,), users.find_user_by_pk, "authenticated", "Get the user by id"),
    UserRoute(
        "PUT",
        USER_ID,
        (protect, admin_only),
        users.update_user,
        "admin",
        "Update the user by id, restricted to admin",
    ),
    UserRoute(
        "DELETE",
        USER_ID,
        (protect, superadmin_only),
        users.delete_user,
        "superadmin",
        "Delete the user by id, restricted to superadmin",
    ),
    UserRoute("POST", "/login", (), auth.login, "public", "Login as user"),
    UserRoute("POST", "/logout", (), auth.logout, "public", "Logout"),
)


def build_router(routes: Iterable[UserRoute] = USER_ROUTES) -> APIRouter:
    """Render ``routes`` into an :class:`APIRouter`, preserving table and guard order."""

    router = APIRouter(tags=["Users"])
    for route in routes:
        router.add_api_route(
            route.path,
            route.handler,
            methods=[route.method],
            dependencies=[Depends(guard) for guard in route.guards],
            summary=route.summary,
            responses=route.responses(),
            name=route.handler.__name__,
        )
    return router


__all__ = ["USER_ROUTES", "UserRoute", "admin_only", "build_router", "superadmin_only"]
