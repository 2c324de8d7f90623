"""Tests for the account service layer."""

import uuid

import pytest
from django.contrib.auth import get_user_model

from storefront.accounts import services
from storefront.core.auth import AuthContext
from storefront.core.exceptions import DuplicateUser, Unauthorized, UserNotFound

User = get_user_model()


@pytest.mark.django_db
class TestRegisterUser:
    def test_creates_user_with_hashed_password(self):
        user = services.register_user(
            username="newshopper",
            email="new@example.com",
            password="Str0ng-Passphrase!",
            phone="555-0199",
        )

        user.refresh_from_db()
        assert user.username == "newshopper"
        assert user.phone == "555-0199"
        assert "Str0ng-Passphrase!" not in user.password
        assert user.password.startswith("bcrypt_sha256$$2b$10$")
        assert user.check_password("Str0ng-Passphrase!")

    def test_duplicate_email(self, user):
        with pytest.raises(DuplicateUser):
            services.register_user(username="someoneelse", email=user.email, password="Str0ng-Passphrase!")

    def test_duplicate_email_ignores_case(self, user):
        with pytest.raises(DuplicateUser):
            services.register_user(
                username="someoneelse",
                email=user.email.upper(),
                password="Str0ng-Passphrase!",
            )

    def test_duplicate_username(self, user):
        with pytest.raises(DuplicateUser):
            services.register_user(username=user.username, email="fresh@example.com", password="Str0ng-Passphrase!")

        assert not User.objects.filter(email="fresh@example.com").exists()


@pytest.mark.django_db
class TestGetProfile:
    def test_returns_user(self, auth, user):
        assert services.get_profile(auth) == user

    def test_missing_user(self):
        with pytest.raises(UserNotFound):
            services.get_profile(AuthContext(user_id=uuid.uuid4(), username="ghost", email="ghost@example.com"))

    def test_anonymous(self):
        with pytest.raises(Unauthorized):
            services.get_profile(AuthContext.anonymous())
