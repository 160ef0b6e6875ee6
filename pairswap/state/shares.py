"""
Share ledger for a single pool.

Shares are fungible ownership units. This table is the in-memory implementation
of the ledger collaborator: the pool only calls `mint`, `burn`, `total_supply`
and `balance_of`.

Notes:
- Balances are always non-negative; zero balances are omitted.
- `LOCKED_LIQUIDITY_ADDRESS` can receive shares but can never move or burn them.
- Minting to the zero address is refused.
"""

from __future__ import annotations

from typing import Dict

from .balances import Address, Amount, is_null_address

LOCKED_LIQUIDITY_ADDRESS = "0x000000000000000000000000000000000000dEaD"


class ShareTable:
    """Share balances (holder -> amount) plus the running total supply."""

    def __init__(self) -> None:
        self._balances: Dict[Address, Amount] = {}
        self._total_supply: Amount = 0

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder, 0)

    def total_supply(self) -> Amount:
        return self._total_supply

    def _set(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Share balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def mint(self, to: Address, amount: Amount) -> None:
        if is_null_address(to):
            raise ValueError("cannot mint shares to the zero address")
        if amount <= 0:
            raise ValueError(f"Mint amount must be positive: {amount}")
        self._set(to, self.balance_of(to) + amount)
        self._total_supply += amount

    def burn(self, holder: Address, amount: Amount) -> None:
        if holder == LOCKED_LIQUIDITY_ADDRESS:
            raise ValueError("locked liquidity cannot be burned")
        if amount <= 0:
            raise ValueError(f"Burn amount must be positive: {amount}")
        current = self.balance_of(holder)
        if amount > current:
            raise ValueError(f"Insufficient share balance: {current} < {amount}")
        self._set(holder, current - amount)
        self._total_supply -= amount

    def transfer(self, sender: Address, to: Address, amount: Amount) -> None:
        if sender == LOCKED_LIQUIDITY_ADDRESS:
            raise ValueError("locked liquidity cannot be transferred")
        if is_null_address(to):
            raise ValueError("cannot transfer shares to the zero address")
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        current = self.balance_of(sender)
        if amount > current:
            raise ValueError(f"Insufficient share balance: {current} < {amount}")
        self._set(sender, current - amount)
        self._set(to, self.balance_of(to) + amount)

    def get_all_balances(self) -> Dict[Address, Amount]:
        return dict(self._balances)

    def snapshot(self) -> tuple[Dict[Address, Amount], Amount]:
        return dict(self._balances), self._total_supply

    def restore(self, snapshot: tuple[Dict[Address, Amount], Amount]) -> None:
        balances, total_supply = snapshot
        self._balances = dict(balances)
        self._total_supply = total_supply

    def verify_supply(self) -> bool:
        """Verify the running total equals the sum of balances."""
        return sum(self._balances.values()) == self._total_supply

    def __repr__(self) -> str:
        return f"ShareTable({len(self._balances)} holders, supply={self._total_supply})"
