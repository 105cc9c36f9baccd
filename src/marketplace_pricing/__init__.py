"""
Marketplace Pricing Package

Computes the ordered line items (base price, discounts, delivery fees and
platform commissions) for a marketplace transaction before it is created.
"""

__version__ = "1.0.0"
