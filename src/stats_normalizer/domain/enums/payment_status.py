# Copyright (c)
# SPDX-License-Identifier: MIT
"""
Payment status enumeration.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class PaymentStatus(str, Enum):
    """Settlement state of one monthly earnings line."""

    PAID = "paid"
    OUTSTANDING = "outstanding"
