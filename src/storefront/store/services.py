"""Cart and order service layer.

Views call these functions instead of manipulating models directly. Every
function takes the shopper's AuthContext and only ever touches carts and
orders owned by that shopper.

Cart mutations hold a row lock on the shopper's cart for the length of the
transaction, so concurrent requests for the same shopper are applied one
after another instead of overwriting each other.
"""

import logging
import uuid
from decimal import ROUND_HALF_EVEN, Decimal

from django.db import DatabaseError, transaction

from storefront.catalog.loader import Catalog, get_catalog
from storefront.core.auth import AuthContext
from storefront.core.exceptions import (
    CartNotFound,
    CheckoutIncomplete,
    EmptyCart,
    ItemNotInCart,
    OrderNotFound,
)

from .models import Cart, CartItem, Order, OrderItem

logger = logging.getLogger(__name__)

INCREMENT = "increment"
DECREMENT = "decrement"
CART_ACTIONS = (INCREMENT, DECREMENT)


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round to specified decimal places using banker's rounding."""
    quantize_str = "0." + "0" * places
    return amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_EVEN)


def calculate_subtotal(lines) -> Decimal:
    """Sum of price x quantity over the snapshot price stored on each line."""
    return round_money(sum((line.price * line.quantity for line in lines), Decimal("0")))


def load_cart(user_id, *, for_update: bool = False) -> Cart | None:
    """Return the shopper's cart, or None if they never added anything."""
    queryset = Cart.objects.filter(user_id=user_id)
    if for_update:
        queryset = queryset.select_for_update()
    return queryset.first()


def ensure_cart(cart: Cart | None, user_id) -> Cart:
    """Return ``cart``, or a newly created locked cart when it is None."""
    if cart is not None:
        return cart
    cart, _ = Cart.objects.get_or_create(user_id=user_id)
    return Cart.objects.select_for_update().get(pk=cart.pk)


def get_cart_lines(auth: AuthContext) -> list[CartItem]:
    """Cart lines for display, in the order they were added."""
    cart = load_cart(auth.require())
    if cart is None:
        return []
    return list(cart.items.all())


@transaction.atomic
def add_item(auth: AuthContext, product_id, catalog: Catalog | None = None) -> Cart:
    """Add one unit of a catalog product to the shopper's cart.

    Creates the cart on first use. Adding a product already in the cart
    bumps its quantity; otherwise a new line is appended with name, price,
    image and category copied from the catalog.

    Args:
        auth: The shopper's auth context
        product_id: Catalog item id
        catalog: Catalog to look the item up in (default: the process catalog)

    Returns:
        The shopper's cart

    Raises:
        Unauthorized: No shopper in the auth context
        ItemNotFound: The catalog has no item with that id
    """
    user_id = auth.require()
    item = (catalog or get_catalog()).get_item(product_id)

    cart = ensure_cart(load_cart(user_id, for_update=True), user_id)
    line = cart.items.filter(product_id=item.id).first()
    if line is not None:
        line.quantity += 1
        line.save(update_fields=["quantity"])
    else:
        cart.items.create(
            product_id=item.id,
            name=item.name,
            price=item.price,
            image=item.image,
            category=item.category,
            quantity=1,
        )
    cart.save(update_fields=["updated_at"])

    logger.debug("Added product %s to cart of user %s", item.id, user_id)
    return cart


@transaction.atomic
def update_item(auth: AuthContext, product_id, action: str) -> Cart:
    """Increment or decrement the quantity of a cart line.

    Decrementing a line with quantity 1 leaves it unchanged; lines are never
    removed by this operation.

    Args:
        auth: The shopper's auth context
        product_id: Product id of the cart line
        action: "increment" or "decrement"

    Returns:
        The shopper's cart

    Raises:
        Unauthorized: No shopper in the auth context
        ValueError: action is not one of CART_ACTIONS
        CartNotFound: The shopper has no cart
        ItemNotInCart: The cart has no line for that product
    """
    user_id = auth.require()
    if action not in CART_ACTIONS:
        raise ValueError(f"Invalid action: {action}. Must be one of {list(CART_ACTIONS)}")

    cart = load_cart(user_id, for_update=True)
    if cart is None:
        raise CartNotFound()

    try:
        product_id = int(product_id)
    except (TypeError, ValueError):
        raise ItemNotInCart() from None

    line = cart.items.filter(product_id=product_id).first()
    if line is None:
        raise ItemNotInCart()

    if action == INCREMENT:
        line.quantity += 1
        line.save(update_fields=["quantity"])
    elif line.quantity > 1:
        line.quantity -= 1
        line.save(update_fields=["quantity"])
    cart.save(update_fields=["updated_at"])

    return cart


def checkout(auth: AuthContext) -> Order:
    """Turn the shopper's cart into an order and empty the cart.

    The cart row stays locked from the first read until the cart is empty,
    so a second checkout for the same shopper waits and then finds nothing
    to order. The order and its lines are written first. Emptying the cart
    runs in its own savepoint; if it fails the order is still committed and
    CheckoutIncomplete is raised afterwards.

    Args:
        auth: The shopper's auth context

    Returns:
        The new Order

    Raises:
        Unauthorized: No shopper in the auth context
        EmptyCart: The shopper has no cart or the cart has no lines
        CheckoutIncomplete: The order was saved but the cart could not be emptied
    """
    user_id = auth.require()
    clear_error = None

    with transaction.atomic():
        cart = load_cart(user_id, for_update=True)
        lines = list(cart.items.all()) if cart is not None else []
        if not lines:
            raise EmptyCart()

        order = Order.objects.create(user_id=user_id, sub_total=calculate_subtotal(lines))
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product_id=line.product_id,
                name=line.name,
                price=line.price,
                image=line.image,
                category=line.category,
                quantity=line.quantity,
            )
            for line in lines
        ])

        try:
            with transaction.atomic():
                CartItem.objects.filter(cart=cart).delete()
                cart.save(update_fields=["updated_at"])
        except DatabaseError as e:
            clear_error = e

    if clear_error is not None:
        logger.error(
            "Order %s saved but cart of user %s was not emptied",
            order.pk,
            user_id,
            exc_info=clear_error,
        )
        raise CheckoutIncomplete(order.pk) from clear_error

    logger.info("Order %s placed by user %s, sub total %s", order.pk, user_id, order.sub_total)
    return order


def list_orders(auth: AuthContext) -> list[Order]:
    """All of the shopper's orders, oldest first."""
    user_id = auth.require()
    return list(
        Order.objects.filter(user_id=user_id)
        .prefetch_related("items")
        .order_by("created_at")
    )


def get_order(auth: AuthContext, order_id) -> Order:
    """Fetch one of the shopper's orders.

    Raises:
        Unauthorized: No shopper in the auth context
        OrderNotFound: No order with that id belongs to the shopper
    """
    user_id = auth.require()
    try:
        order_id = uuid.UUID(str(order_id))
    except ValueError:
        raise OrderNotFound() from None

    order = (
        Order.objects.filter(pk=order_id, user_id=user_id)
        .prefetch_related("items")
        .first()
    )
    if order is None:
        raise OrderNotFound()
    return order


@transaction.atomic
def reorder(auth: AuthContext, order_id) -> Cart:
    """Copy an order's lines back into the shopper's cart.

    Lines merge by product id: a product already in the cart gains the
    order's quantity, anything else is appended with the order's snapshot.
    The order itself is left untouched and no new order is created.

    Raises:
        Unauthorized: No shopper in the auth context
        OrderNotFound: No order with that id belongs to the shopper
    """
    user_id = auth.require()
    order = get_order(auth, order_id)

    cart = ensure_cart(load_cart(user_id, for_update=True), user_id)
    existing = {line.product_id: line for line in cart.items.all()}

    for order_item in order.items.all():
        line = existing.get(order_item.product_id)
        if line is not None:
            line.quantity += order_item.quantity
            line.save(update_fields=["quantity"])
        else:
            existing[order_item.product_id] = cart.items.create(
                product_id=order_item.product_id,
                name=order_item.name,
                price=order_item.price,
                image=order_item.image,
                category=order_item.category,
                quantity=order_item.quantity,
            )
    cart.save(update_fields=["updated_at"])

    logger.info("User %s reordered order %s", user_id, order.pk)
    return cart
