"""Cart and order models."""

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from storefront.core.exceptions import ImmutableRecordError


class LineItemFields(models.Model):
    """Catalog product snapshot plus quantity.

    Name, price, image and category are copied when the line is created, so
    later catalog changes never reach existing lines.
    """

    product_id = models.PositiveIntegerField()
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=100, blank=True)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        abstract = True

    @property
    def line_total(self):
        return self.price * self.quantity


class Cart(models.Model):
    """The single pending-purchase document for a shopper."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Cart for {self.user_id}"


class CartItem(LineItemFields):
    """One line in a cart. At most one line per product."""

    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product_id"],
                name="store_cartitem_unique_product",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="store_cartitem_quantity_gte_1",
            ),
        ]

    def __str__(self):
        return f"{self.name} x{self.quantity}"


class ImmutableModel(models.Model):
    """Rows that can be inserted but never updated."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError()
        super().save(*args, **kwargs)


class Order(ImmutableModel):
    """Historical snapshot of a cart at checkout."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    sub_total = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"Order {self.pk}"

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items.all())


class OrderItem(ImmutableModel, LineItemFields):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} x{self.quantity}"
