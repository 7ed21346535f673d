"""Stripe checkout webhook receiver with customer, merchant and automation notifications."""

__version__ = "0.1.0"
