"""Password hashers."""

from django.contrib.auth.hashers import BCryptSHA256PasswordHasher


class StorefrontBCryptPasswordHasher(BCryptSHA256PasswordHasher):
    """bcrypt with a cost factor of 10."""

    rounds = 10
