from enum import Enum


class Role(str, Enum):
    """Roles a user can be granted."""

    ADMIN = "admin"
    USER = "user"


class AuthEndpoints(str, Enum):
    """Platform auth endpoint paths."""

    USER = "/user"
