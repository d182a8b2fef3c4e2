from dataclasses import replace
from typing import Dict, List, Optional

from amount import Amount
from errors import InsufficientFundsError, InsufficientHeldFundsError
from models import AccountSnapshot, ClientAccount


class Ledger:
    """
    Owns every client account and applies balance mutations.

    Each mutation computes all new values before assigning any of them, so a
    failing call leaves the account exactly as it was.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def get(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account if it exists, without creating it."""
        return self._accounts.get(client_id)

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create a zeroed one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def credit_available(self, client_id: int, amount: Amount) -> None:
        """Add to available. Allowed on locked accounts."""
        account = self.get_or_create(client_id)
        available = account.available.checked_add(amount)
        # total must stay representable as well
        available.checked_add(account.held)
        account.available = available

    def debit_available(self, client_id: int, amount: Amount) -> None:
        account = self.get_or_create(client_id)
        if account.available < amount:
            raise InsufficientFundsError(
                f"client {client_id}: available {account.available} < {amount}"
            )
        account.available = account.available.checked_sub(amount)

    def move_available_to_held(self, client_id: int, amount: Amount) -> None:
        account = self.get_or_create(client_id)
        if account.available < amount:
            raise InsufficientFundsError(
                f"client {client_id}: available {account.available} < {amount}"
            )
        available = account.available.checked_sub(amount)
        held = account.held.checked_add(amount)
        account.available, account.held = available, held

    def move_held_to_available(self, client_id: int, amount: Amount) -> None:
        account = self.get_or_create(client_id)
        if account.held < amount:
            raise InsufficientHeldFundsError(f"client {client_id}: held {account.held} < {amount}")
        held = account.held.checked_sub(amount)
        available = account.available.checked_add(amount)
        account.available, account.held = available, held

    def remove_held(self, client_id: int, amount: Amount) -> None:
        """Take held funds out of the system entirely (chargeback)."""
        account = self.get_or_create(client_id)
        if account.held < amount:
            raise InsufficientHeldFundsError(f"client {client_id}: held {account.held} < {amount}")
        account.held = account.held.checked_sub(amount)

    def lock(self, client_id: int) -> None:
        self.get_or_create(client_id).locked = True

    def is_locked(self, client_id: int) -> bool:
        account = self._accounts.get(client_id)
        return account is not None and account.locked

    def copy_of(self, client_id: int) -> Optional[ClientAccount]:
        """Detached copy of an account, for restore()."""
        account = self._accounts.get(client_id)
        return replace(account) if account is not None else None

    def restore(self, client_id: int, account: Optional[ClientAccount]) -> None:
        """
        Put back an account captured with copy_of().
        None means the account did not exist and is removed again.
        """
        if account is None:
            self._accounts.pop(client_id, None)
        else:
            self._accounts[client_id] = account

    def snapshot(self) -> List[AccountSnapshot]:
        """Return all accounts (for final output), ordered by client id."""
        return [AccountSnapshot.of(self._accounts[client_id]) for client_id in sorted(self._accounts)]
