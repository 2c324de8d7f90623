"""Account service layer: registration, login, logout and profile lookup."""

import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.db import DatabaseError, IntegrityError, transaction

from storefront.core.auth import AuthContext
from storefront.core.exceptions import (
    DuplicateUser,
    InvalidCredentials,
    SessionError,
    UserNotFound,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def register_user(username: str, email: str, password: str, phone: str = ""):
    """Create a shopper account with a hashed password.

    Raises:
        DuplicateUser: The email or username is already registered
    """
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateUser()
    if User.objects.filter(username__iexact=username).exists():
        raise DuplicateUser()

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                username=username,
                phone=phone,
            )
    except IntegrityError as e:
        raise DuplicateUser() from e

    logger.info("Registered user %s", user.pk)
    return user


def log_in(request, email: str, password: str) -> AuthContext:
    """Check credentials and bind the shopper to the session.

    Raises:
        InvalidCredentials: Unknown email or wrong password; the two are not
            distinguished
    """
    user = authenticate(request, email=email, password=password)
    if user is None:
        logger.info("Failed login attempt")
        raise InvalidCredentials()

    login(request, user)
    request.auth_context = AuthContext.for_user(user)
    return request.auth_context


def log_out(request):
    """Destroy the session.

    Raises:
        SessionError: The session store could not delete the session
    """
    try:
        logout(request)
    except DatabaseError as e:
        raise SessionError() from e
    request.auth_context = AuthContext.anonymous()


def get_profile(auth: AuthContext):
    """Return the shopper's account.

    Raises:
        Unauthorized: No shopper in the auth context
        UserNotFound: The account no longer exists
    """
    user = User.objects.filter(pk=auth.require()).first()
    if user is None:
        raise UserNotFound()
    return user
