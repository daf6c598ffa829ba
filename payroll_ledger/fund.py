"""Fund collaborator used to move wages.

The ledger only depends on the :class:`Fund` protocol. :class:`Token` is a
small in-memory fungible token with a fixed supply minted to its owner, and
:class:`TokenFund` holds the payroll balance as one account of that token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol

from .errors import InsufficientFund, TransferRejected

DEFAULT_FUND_ACCOUNT = "payroll-fund"


class Fund(Protocol):
    def balance(self) -> int:
        ...

    def transfer_in(self, source: str, amount: int) -> None:
        ...

    def transfer_out(self, recipient: str, amount: int) -> None:
        ...


@dataclass
class Token:
    name: str
    symbol: str
    total_supply: int
    owner: str
    balances: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.total_supply < 0:
            raise ValueError("total_supply must be non-negative")
        if not self.balances:
            self.balances[self.owner] = self.total_supply

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise TransferRejected("Transfer amount must be non-negative", amount=amount)
        if not recipient:
            raise TransferRejected("Transfer to the empty account", sender=sender)
        available = self.balance_of(sender)
        if available < amount:
            raise InsufficientFund(
                f"{sender} holds {available} {self.symbol}, needs {amount}",
                account=sender,
                available=available,
                amount=amount,
            )
        self.balances[sender] = available - amount
        self.balances[recipient] = self.balance_of(recipient) + amount


class TokenFund:
    def __init__(self, token: Token, account: str = DEFAULT_FUND_ACCOUNT) -> None:
        self.token = token
        self.account = account

    def balance(self) -> int:
        return self.token.balance_of(self.account)

    def transfer_in(self, source: str, amount: int) -> None:
        self.token.transfer(source, self.account, amount)

    def transfer_out(self, recipient: str, amount: int) -> None:
        self.token.transfer(self.account, recipient, amount)
