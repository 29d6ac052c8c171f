"""Trader ledger records for the Revnet simulation."""

from dataclasses import dataclass
from typing import Optional

from .routing import Venue


@dataclass(frozen=True)
class PurchaseRecord:
    """A filled purchase: ETH in, tokens out."""
    eth_spent: float
    tokens_received: float
    source: Venue
    day: int


@dataclass(frozen=True)
class SaleRecord:
    """A sale attempt: tokens in, ETH out (zero when voided)."""
    tokens_spent: float
    eth_received: float
    source: Venue
    day: int

    @property
    def voided(self) -> bool:
        return self.source is Venue.VOIDED


class Trader:
    """Append-only ledger holding at most one purchase and one sale.

    Both records are write-once. A sale can only follow a purchase, and a
    voided sale still counts as the trader's one sale attempt.
    """

    def __init__(self, trader_id: int) -> None:
        self.trader_id = trader_id
        self.purchase: Optional[PurchaseRecord] = None
        self.sale: Optional[SaleRecord] = None

    def record_purchase(self, eth_spent: float, tokens_received: float, source: Venue, day: int) -> PurchaseRecord:
        if self.purchase is not None:
            raise ValueError(f"Trader {self.trader_id} already has a purchase recorded")
        self.purchase = PurchaseRecord(eth_spent, tokens_received, source, day)
        return self.purchase

    def record_sale(self, tokens_spent: float, eth_received: float, source: Venue, day: int) -> SaleRecord:
        if self.purchase is None:
            raise ValueError(f"Trader {self.trader_id} cannot sell before purchasing")
        if self.sale is not None:
            raise ValueError(f"Trader {self.trader_id} already has a sale recorded")
        self.sale = SaleRecord(tokens_spent, eth_received, source, day)
        return self.sale

    @property
    def has_sold(self) -> bool:
        return self.sale is not None

    def is_eligible_to_sell(self, day: int, minimum_days_held: int) -> bool:
        """Holding period met and no sale attempted yet."""
        if self.purchase is None or self.sale is not None:
            return False
        return day - self.purchase.day >= minimum_days_held

    @property
    def days_held(self) -> Optional[int]:
        if self.purchase is None or self.sale is None:
            return None
        return self.sale.day - self.purchase.day

    @property
    def profit(self) -> Optional[float]:
        """ETH received minus ETH spent, once sold."""
        if self.purchase is None or self.sale is None:
            return None
        return self.sale.eth_received - self.purchase.eth_spent

    def __repr__(self) -> str:
        return f"Trader(id={self.trader_id}, purchase={self.purchase}, sale={self.sale})"
