"""Domain layer for polymath application."""

from polymath.domain.ledger import BusinessLedger
from polymath.domain.portfolio import PortfolioService

__all__ = [
    "BusinessLedger",
    "PortfolioService",
]
