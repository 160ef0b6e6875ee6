"""
Asset balance tracking for the in-memory environment.

Implements BalanceTable[Address, AssetId] -> Amount. The pool never touches
this table directly; it sees it only through the asset-transfer collaborator.
"""

from typing import Dict, Tuple


# Type aliases
Address = str  # 20-byte hex string (0x...)
AssetId = str  # asset identity, compared lexicographically for canonical ordering
Amount = int  # Non-negative integer (arbitrary precision)

ZERO_ADDRESS = "0x" + "00" * 20


def is_null_address(address: object) -> bool:
    return address is None or address == "" or address == ZERO_ADDRESS


class BalanceTable:
    """
    Balance table mapping (holder, asset) -> amount.

    Zero balances are omitted to keep the table sparse.
    """

    def __init__(self):
        self._balances: Dict[Tuple[Address, AssetId], Amount] = {}

    def get(self, holder: Address, asset: AssetId) -> Amount:
        """Get balance for (holder, asset). Returns 0 if not found."""
        return self._balances.get((holder, asset), 0)

    def set(self, holder: Address, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (holder, asset).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((holder, asset), None)
        else:
            self._balances[(holder, asset)] = amount

    def add(self, holder: Address, asset: AssetId, delta: Amount) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(holder, asset)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(holder, asset, new_balance)

    def subtract(self, holder: Address, asset: AssetId, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(holder, asset, -delta)

    def move(self, sender: Address, recipient: Address, asset: AssetId, amount: Amount) -> None:
        """Move `amount` of `asset` between holders; fails without side effects."""
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        self.subtract(sender, asset, amount)
        self.add(recipient, asset, amount)

    def get_all_balances(self) -> Dict[Tuple[Address, AssetId], Amount]:
        return dict(self._balances)

    def snapshot(self) -> Dict[Tuple[Address, AssetId], Amount]:
        """Copy of the table contents, for `restore()`."""
        return dict(self._balances)

    def restore(self, snapshot: Dict[Tuple[Address, AssetId], Amount]) -> None:
        self._balances = dict(snapshot)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
