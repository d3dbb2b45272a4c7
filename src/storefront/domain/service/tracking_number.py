"""Domain service: tracking number generation.

Tracking numbers are the customer-facing order identifier: ``SHP``
followed by eight upper-case hexadecimal characters taken from a fresh
random UUID.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable

PREFIX = "SHP"


class TrackingNumberGenerator:

    def __init__(self, id_factory: Callable[[], uuid.UUID] = uuid.uuid4) -> None:
        self._id_factory = id_factory

    def generate(self) -> str:
        return PREFIX + self._id_factory().hex[:8].upper()
