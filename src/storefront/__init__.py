"""Storefront: catalog browsing, shopping cart and order history."""
