"""Revnet bonding-curve issuer and redeemer.

The Revnet issues tokens at a price ceiling that rises in discrete steps
every ``price_ceiling_increase_frequency_in_days`` days, and redeems tokens
against its ETH treasury at a tax-weighted price floor. Time only moves
through ``increment_day``.
"""


class Revnet:
    """Simplified Revnet holding token supply and an ETH treasury.

    Issuance rate per ETH is ``(1 - pct) ** (day // frequency)``; its
    reciprocal is the price ceiling. Redemption pays
    ``eth_balance * ratio * (ratio * tax + 1 - tax)`` for destroying a
    ``ratio`` share of supply, which is convex in ``ratio`` and pays out the
    whole treasury when the whole supply is destroyed. During the first
    ``boost_duration_in_days`` days a ``boost_percent`` share of every
    issuance goes to the boost bucket.
    """

    def __init__(
        self,
        price_ceiling_increase_percentage: float,
        price_ceiling_increase_frequency_in_days: int,
        price_floor_tax_intensity: float,
        premint_amount: float = 0.0,
        boost_percent: float = 0.0,
        boost_duration_in_days: int = 1,
    ) -> None:
        self.price_ceiling_increase_percentage = price_ceiling_increase_percentage
        self.price_ceiling_increase_frequency_in_days = price_ceiling_increase_frequency_in_days
        self.price_floor_tax_intensity = price_floor_tax_intensity
        self.premint_amount = premint_amount
        self.boost_percent = boost_percent
        self.boost_duration_in_days = boost_duration_in_days

        # The premint is held by the boost and counts as outstanding supply
        self.tokens_sent_to_boost: float = premint_amount
        self.token_supply: float = premint_amount
        self.eth_balance: float = 0.0
        self.day: int = 0

    def increment_day(self) -> None:
        self.day += 1

    def in_boost_window(self) -> bool:
        return self.day < self.boost_duration_in_days

    def tokens_created_per_eth(self) -> float:
        """Tokens issued per ETH on the current day (step function of day)."""
        steps = self.day // self.price_ceiling_increase_frequency_in_days
        return (1.0 - self.price_ceiling_increase_percentage) ** steps

    def price_ceiling(self) -> float:
        """Current issuance price in ETH per token."""
        return 1.0 / self.tokens_created_per_eth()

    def eth_reclaim_amount(self, tokens_out: float) -> float:
        """ETH reclaimable by destroying ``tokens_out`` tokens right now."""
        if self.token_supply <= 0:
            return 0.0
        ratio = tokens_out / self.token_supply
        intensity = ratio * self.price_floor_tax_intensity + (1.0 - self.price_floor_tax_intensity)
        return self.eth_balance * ratio * intensity

    def price_floor(self) -> float:
        """Reclaim value of a single token (or the whole supply when below one)."""
        return self.eth_reclaim_amount(min(1.0, self.token_supply))

    def can_redeem(self, tokens_in: float) -> bool:
        """Whether the treasury can honour a redemption of ``tokens_in``."""
        if tokens_in <= 0 or tokens_in > self.token_supply:
            return False
        return self.eth_reclaim_amount(tokens_in) <= self.eth_balance

    def send_to_boost(self, tokens: float) -> None:
        self.tokens_sent_to_boost += tokens

    def create_tokens_at_ceiling(self, eth_in: float) -> float:
        """Issue tokens for ``eth_in`` ETH.

        Returns:
            Tokens delivered to the payer, net of the boost share while the
            boost window is open.
        """
        minted = eth_in * self.tokens_created_per_eth()
        self.eth_balance += eth_in
        self.token_supply += minted
        if self.in_boost_window():
            boosted = minted * self.boost_percent
            self.send_to_boost(boosted)
            return minted - boosted
        return minted

    def destroy_tokens_at_floor(self, tokens_in: float) -> float:
        """Burn ``tokens_in`` tokens and pay out their reclaim amount in ETH."""
        eth_out = self.eth_reclaim_amount(tokens_in)
        self.token_supply -= tokens_in
        self.eth_balance -= eth_out
        return eth_out
