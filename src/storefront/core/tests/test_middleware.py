"""Tests for the storefront error middleware and health check."""

import logging

import pytest
from django.db import DatabaseError, OperationalError
from django.test import RequestFactory

from storefront.core.exceptions import EmptyCart, OrderNotFound, SessionError
from storefront.core.middleware import StorefrontErrorMiddleware


@pytest.fixture
def middleware():
    return StorefrontErrorMiddleware(lambda request: None)


@pytest.fixture
def request_(auth, user):
    request = RequestFactory().post("/checkout")
    request.auth_context = auth
    request.user = user
    return request


@pytest.mark.django_db
class TestStorefrontErrorMiddleware:
    def test_not_found(self, middleware, request_):
        response = middleware.process_exception(request_, OrderNotFound())

        assert response.status_code == 404
        assert b"Order not found or access denied." in response.content

    def test_client_error(self, middleware, request_):
        response = middleware.process_exception(request_, EmptyCart())

        assert response.status_code == 400
        assert b"Your cart is empty." in response.content

    def test_store_failure_is_logged(self, middleware, request_, caplog):
        with caplog.at_level(logging.ERROR, logger="storefront.core.middleware"):
            response = middleware.process_exception(request_, SessionError())

        assert response.status_code == 500
        assert "Store failure handling POST /checkout" in caplog.text

    def test_database_error_is_generic(self, middleware, request_, caplog):
        with caplog.at_level(logging.ERROR, logger="storefront.core.middleware"):
            response = middleware.process_exception(request_, OperationalError("no such table"))

        assert response.status_code == 500
        assert b"no such table" not in response.content
        assert "Database error handling POST /checkout" in caplog.text

    def test_database_outage_still_renders_error_page(self, middleware, request_, monkeypatch):
        class UnreachableCartItems:
            class objects:
                @staticmethod
                def filter(*args, **kwargs):
                    raise OperationalError("server closed the connection")

        monkeypatch.setattr("storefront.store.context_processors.CartItem", UnreachableCartItems)

        response = middleware.process_exception(request_, OperationalError("server closed"))

        assert response.status_code == 500
        assert b"An error occurred. Please try again later." in response.content

    def test_other_exceptions_pass_through(self, middleware, request_):
        assert middleware.process_exception(request_, KeyError("x")) is None


@pytest.mark.django_db
class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    def test_unhealthy(self, client, monkeypatch):
        class DownConnection:
            def cursor(self):
                raise DatabaseError("database is down")

        monkeypatch.setattr("storefront.core.views.connection", DownConnection())

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
