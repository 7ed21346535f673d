"""Plain-text email bodies for order notifications."""

from checkout_notifier.models.order import OrderRecord

MISSING_CUSTOMER_EMAIL = "not provided"
MISSING_PRODUCT = "Not specified"


def customer_email(order: OrderRecord) -> tuple[str, str]:
    """Return (subject, body) of the customer confirmation email."""
    subject = f"Thanks for your order, {order.name}!"
    body = f"""Hi {order.name},

thank you very much for your order.
Your payment of {order.formatted_amount} has arrived safely and we can start preparing your parcel.

We still need to know how you would like your order delivered. Please reply to this email with your choice:
  - Parcel delivery to your address: send us the full address
  - Parcel locker: send us the locker code or address
  - Personal pickup: we will agree on a place and time together

As soon as we have these details we will pack your order and let you know when it is on its way.

Thank you!"""
    return subject, body


def merchant_email(order: OrderRecord) -> tuple[str, str]:
    """Return (subject, body) of the new-order email sent to the shop owner."""
    subject = "New order"
    body = f"""A new order has been paid:

Name: {order.name}
Customer email: {order.email or MISSING_CUSTOMER_EMAIL}
Amount: {order.formatted_amount}
Product(s): {order.product_description or MISSING_PRODUCT}

Full details are available in the Stripe dashboard."""
    return subject, body
