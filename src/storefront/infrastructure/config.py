"""Runtime settings, read from the environment (or a ``.env`` / ``settings.ini``
file) through python-decouple.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from decouple import config

from storefront.domain.model.value_objects import Money
from storefront.domain.service.pricing import PricingPolicy

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    creation_tax_rate: Decimal
    cancellation_tax_rate: Decimal
    free_shipping_threshold: Decimal
    delivery_days: int
    environment: str
    log_level: str

    @property
    def pricing_policy(self) -> PricingPolicy:
        return PricingPolicy(
            creation_tax_rate=self.creation_tax_rate,
            cancellation_tax_rate=self.cancellation_tax_rate,
            free_shipping_threshold=Money(self.free_shipping_threshold),
        )


def load_settings() -> Settings:
    environment = config("ENVIRONMENT", default="development").lower()
    return Settings(
        data_dir=config(
            "STOREFRONT_DATA_DIR", default=str(_PROJECT_ROOT / "data"), cast=Path
        ),
        creation_tax_rate=config(
            "STOREFRONT_CREATION_TAX_RATE", default="0.08", cast=Decimal
        ),
        cancellation_tax_rate=config(
            "STOREFRONT_CANCELLATION_TAX_RATE", default="0.10", cast=Decimal
        ),
        free_shipping_threshold=config(
            "STOREFRONT_FREE_SHIPPING_THRESHOLD", default="100", cast=Decimal
        ),
        delivery_days=config("STOREFRONT_DELIVERY_DAYS", default=2, cast=int),
        environment=environment,
        log_level=config(
            "LOG_LEVEL", default="INFO" if environment == "production" else "WARNING"
        ).upper(),
    )
