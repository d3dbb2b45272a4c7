"""Shipping address snapshot.

Copied onto the order at checkout so later edits to the customer's address
book never change where a historical order was shipped.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ShippingAddress:
    address_id: str
    address_line1: str
    city: str
    country: str
    address_line2: str = ""
    state: str = ""
    postal_code: str = ""
    phone_number: str = ""
    address_type: str = ""

    def searchable_text(self) -> str:
        return " ".join(
            (
                self.address_line1,
                self.address_line2,
                self.city,
                self.state,
                self.postal_code,
                self.country,
            )
        ).lower()
