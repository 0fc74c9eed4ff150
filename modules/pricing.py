"""Per-page pricing for rephrasing and translation quotes."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Dict, Iterable, Mapping

from config import Config
from models.order import DeliverySpeed, Service


class PricingTable:
    """Immutable (service, delivery speed) -> price per page lookup.

    Every combination must be present; a table is built once at startup
    and shared read-only between requests.
    """

    def __init__(self, rates: Mapping[Service, Mapping[DeliverySpeed, Decimal]]) -> None:
        missing = [
            f"{service.value}/{speed.value}"
            for service in Service
            for speed in DeliverySpeed
            if speed not in rates.get(service, {})
        ]
        if missing:
            raise ValueError(f"Pricing table is missing rates for: {', '.join(missing)}")

        frozen: Dict[Service, Mapping[DeliverySpeed, Decimal]] = {}
        for service in Service:
            per_speed = {}
            for speed in DeliverySpeed:
                rate = Decimal(str(rates[service][speed]))
                if rate < 0:
                    raise ValueError(f"Negative rate for {service.value}/{speed.value}: {rate}")
                per_speed[speed] = rate
            frozen[service] = MappingProxyType(per_speed)
        self._rates = MappingProxyType(frozen)

    @classmethod
    def from_config(cls, pricing: Mapping[str, Mapping[str, object]]) -> "PricingTable":
        """Build from the ``PRICING`` config dict (plain string keys)."""
        try:
            rates = {
                Service(service_key): {
                    DeliverySpeed(speed_key): Decimal(str(rate))
                    for speed_key, rate in per_speed.items()
                }
                for service_key, per_speed in pricing.items()
            }
        except ValueError as exc:
            raise ValueError(f"Invalid PRICING configuration: {exc}") from exc
        return cls(rates)

    def rate(self, service: Service, speed: DeliverySpeed) -> Decimal:
        return self._rates[service][speed]

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {
            service.value: {speed.value: str(rate) for speed, rate in per_speed.items()}
            for service, per_speed in self._rates.items()
        }

    def __repr__(self) -> str:
        return f"PricingTable({self.as_dict()})"


# Rates from config.Config.PRICING (the same table create_app loads)
DEFAULT_PRICING = PricingTable.from_config(Config.PRICING)


def rate_label(
    services: Iterable[Service],
    speed: DeliverySpeed,
    table: PricingTable = DEFAULT_PRICING,
) -> Decimal:
    """Combined price per page of the selected services at ``speed``.

    Does not depend on any document: delivery-option labels show it as soon
    as services are ticked.
    """
    return sum((table.rate(service, speed) for service in set(services)), Decimal("0"))


def rate_labels(
    services: Iterable[Service],
    table: PricingTable = DEFAULT_PRICING,
) -> Dict[DeliverySpeed, Decimal]:
    """Combined per-page rate for every delivery speed."""
    selected = set(services)
    return {speed: rate_label(selected, speed, table) for speed in DeliverySpeed}


def price_for(
    services: Iterable[Service],
    speed: DeliverySpeed,
    pages: int,
    table: PricingTable = DEFAULT_PRICING,
) -> Decimal:
    """Total price: combined per-page rate times ``pages``.

    No service selected or zero pages gives 0.
    """
    if pages < 0:
        raise ValueError(f"pages must be >= 0, got {pages}")
    return rate_label(services, speed, table) * pages


def format_price(amount: Decimal | int | float) -> str:
    """Format as a dollar amount with two decimals, e.g. "$12.50"."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"${value}"


def format_rate(amount: Decimal) -> str:
    """Per-page rate without trailing zeros: 5 -> "5", 7.5 -> "7.5"."""
    normalized = amount.normalize()
    if normalized == normalized.to_integral():
        return str(normalized.quantize(Decimal("1")))
    return str(normalized)
