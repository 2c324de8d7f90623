"""Explicit authentication context passed to storefront operations."""

from dataclasses import dataclass

from .exceptions import Unauthorized


@dataclass(frozen=True)
class AuthContext:
    """The shopper a request acts for, or nobody.

    Built once per request from the session and handed to every service
    function that reads or writes shopper-owned data.
    """

    user_id: object = None
    username: str = ""
    email: str = ""

    @classmethod
    def anonymous(cls) -> "AuthContext":
        return cls()

    @classmethod
    def for_user(cls, user) -> "AuthContext":
        return cls(user_id=user.pk, username=user.username, email=user.email)

    @classmethod
    def from_request(cls, request) -> "AuthContext":
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return cls.anonymous()
        return cls.for_user(user)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def require(self):
        """Return the shopper's user id or raise Unauthorized."""
        if self.user_id is None:
            raise Unauthorized()
        return self.user_id

