"""Role hierarchy and per-resource capability rules.

Every write endpoint declares a ``(resource, action)`` pair; the rules for that pair live in
``CAPABILITIES`` and nowhere else. ``min_role`` is enforced by the route gate before the
handler runs. ``owner_field`` rules are checked by the service once the stored record is
loaded: the caller must own the record or hold ``bypass_role``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.errors import ApiError, forbidden
from app.schemas.auth import AuthPrincipal


class Role(str, Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


ROLE_LEVELS: dict[Role, int] = {
    Role.USER: 1,
    Role.MODERATOR: 2,
    Role.ADMIN: 3,
}


def parse_role(value: str | Role | None) -> Role:
    """Unknown or missing roles collapse to the lowest tier."""
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value or "").strip().lower())
    except ValueError:
        return Role.USER


def role_level(value: str | Role | None) -> int:
    return ROLE_LEVELS[parse_role(value)]


def has_minimum_role(value: str | Role | None, minimum: Role) -> bool:
    return role_level(value) >= ROLE_LEVELS[minimum]


def insufficient_role(minimum: Role) -> ApiError:
    return forbidden(f"This action requires {minimum.value} privileges", code="INSUFFICIENT_ROLE")


class Resource(str, Enum):
    PAGES = "pages"
    COMMON_CONTENT = "common_content"
    BLOG_POSTS = "blog_posts"
    CATEGORIES = "categories"
    TAGS = "tags"
    CUSTOM_CODES = "custom_codes"
    MEDIA = "media"
    MEDIA_FOLDERS = "media_folders"
    UPLOADS = "uploads"
    USERS = "users"
    SYSTEM = "system"


class Action(str, Enum):
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class Capability:
    min_role: Role
    owner_field: str | None = None
    bypass_role: Role | None = None


_AUTHENTICATED = Capability(Role.USER)
_MODERATOR = Capability(Role.MODERATOR)
_ADMIN = Capability(Role.ADMIN)
_AUTHOR_OR_MODERATOR = Capability(Role.USER, owner_field="author_id", bypass_role=Role.MODERATOR)
_SELF_OR_ADMIN = Capability(Role.USER, owner_field="id", bypass_role=Role.ADMIN)

CAPABILITIES: dict[tuple[Resource, Action], Capability] = {
    (Resource.PAGES, Action.CREATE): _MODERATOR,
    (Resource.PAGES, Action.UPDATE): _MODERATOR,
    (Resource.PAGES, Action.DELETE): _MODERATOR,
    (Resource.COMMON_CONTENT, Action.UPDATE): _MODERATOR,
    (Resource.COMMON_CONTENT, Action.DELETE): _MODERATOR,
    (Resource.BLOG_POSTS, Action.CREATE): _AUTHENTICATED,
    (Resource.BLOG_POSTS, Action.UPDATE): _AUTHOR_OR_MODERATOR,
    (Resource.BLOG_POSTS, Action.DELETE): _AUTHOR_OR_MODERATOR,
    (Resource.CATEGORIES, Action.CREATE): _MODERATOR,
    (Resource.CATEGORIES, Action.UPDATE): _MODERATOR,
    (Resource.CATEGORIES, Action.DELETE): _MODERATOR,
    (Resource.TAGS, Action.CREATE): _MODERATOR,
    (Resource.TAGS, Action.UPDATE): _MODERATOR,
    (Resource.TAGS, Action.DELETE): _MODERATOR,
    (Resource.CUSTOM_CODES, Action.CREATE): _ADMIN,
    (Resource.CUSTOM_CODES, Action.UPDATE): _ADMIN,
    (Resource.CUSTOM_CODES, Action.DELETE): _ADMIN,
    (Resource.MEDIA, Action.CREATE): _AUTHENTICATED,
    (Resource.MEDIA, Action.UPDATE): _AUTHENTICATED,
    (Resource.MEDIA, Action.DELETE): _MODERATOR,
    (Resource.MEDIA_FOLDERS, Action.CREATE): _AUTHENTICATED,
    (Resource.MEDIA_FOLDERS, Action.DELETE): _MODERATOR,
    (Resource.UPLOADS, Action.LIST): _AUTHENTICATED,
    (Resource.UPLOADS, Action.CREATE): _AUTHENTICATED,
    (Resource.UPLOADS, Action.DELETE): _AUTHENTICATED,
    (Resource.USERS, Action.LIST): _MODERATOR,
    (Resource.USERS, Action.UPDATE): _SELF_OR_ADMIN,
    (Resource.USERS, Action.DELETE): _ADMIN,
    (Resource.SYSTEM, Action.LIST): _ADMIN,
}


def capability_for(resource: Resource, action: Action) -> Capability:
    return CAPABILITIES[(resource, action)]


def is_owner(principal: AuthPrincipal, record: Mapping[str, Any], owner_field: str) -> bool:
    owner = record.get(owner_field)
    return owner is not None and str(owner) == principal.user_id


def ensure_can_modify(principal: AuthPrincipal, record: Mapping[str, Any], capability: Capability) -> None:
    """Raise 403 unless the principal satisfies the capability for this stored record."""
    if not has_minimum_role(principal.role, capability.min_role):
        raise insufficient_role(capability.min_role)
    if capability.owner_field is None:
        return
    if is_owner(principal, record, capability.owner_field):
        return
    if capability.bypass_role is not None and has_minimum_role(principal.role, capability.bypass_role):
        return
    raise forbidden("You do not have permission to modify this resource", code="NOT_RESOURCE_OWNER")


__all__ = [
    "Action",
    "CAPABILITIES",
    "Capability",
    "ROLE_LEVELS",
    "Resource",
    "Role",
    "capability_for",
    "ensure_can_modify",
    "has_minimum_role",
    "insufficient_role",
    "is_owner",
    "parse_role",
    "role_level",
]
