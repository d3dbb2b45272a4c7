"""JSON-file-backed implementation of AddressBook.

Each record is a saved address plus the ``customer_id`` that owns it.
"""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.address import ShippingAddress
from storefront.domain.repository.address_book import AddressBook
from storefront.infrastructure.persistence.json_file import JsonFile

_FIELDS = (
    "address_id",
    "address_type",
    "phone_number",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "postal_code",
    "country",
)


class JsonAddressBook(AddressBook):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_address(self, customer_id: str, address_id: str) -> ShippingAddress | None:
        for raw in self._file.load():
            if raw["customer_id"] == customer_id and raw["address_id"] == address_id:
                return ShippingAddress(**{k: raw[k] for k in _FIELDS if k in raw})
        return None
