"""
Tariffs subpackage.

Public API:
- Tariff, FlatRateRule, TimeBasedTariff
- price
"""

from .models import Tariff, FlatRateRule, TimeBasedTariff, parse_clock
from .pricer import price, find_flat_rate, charged_class

__all__ = [
    "Tariff",
    "FlatRateRule",
    "TimeBasedTariff",
    "parse_clock",
    "price",
    "find_flat_rate",
    "charged_class",
]
