# artisan/ledger/wallet.py
"""
Minimal in-memory currency wallet.

The crafting engine treats currency as an external collaborator: it asks whether a
cost is affordable, debits it, and credits currency-kind recipe outputs. Any object
with the same methods can be passed to the engine instead.
"""
from typing import Any, Dict, Mapping, Optional, Union

from artisan.crafting.types import CraftingQuality, CurrencyType, ResultKind
from artisan.utils.logger import Logger

CurrencyKey = Union[CurrencyType, str]


def _currency(key: CurrencyKey) -> CurrencyType:
    return key if isinstance(key, CurrencyType) else CurrencyType(key)


class CurrencyWallet:
    def __init__(self, balances: Optional[Mapping[CurrencyKey, int]] = None):
        self.balances: Dict[CurrencyType, int] = {c: 0 for c in CurrencyType}
        for key, amount in (balances or {}).items():
            self.balances[_currency(key)] = max(0, int(amount))

    def balance(self, currency: CurrencyKey) -> int:
        return self.balances.get(_currency(currency), 0)

    def affordable(self, currency: CurrencyKey, amount: int) -> bool:
        return self.balance(currency) >= amount

    def can_afford(self, costs: Mapping[CurrencyKey, int]) -> bool:
        return all(self.affordable(c, a) for c, a in costs.items() if a > 0)

    def debit(self, currency: CurrencyKey, amount: int) -> bool:
        if amount <= 0 or not self.affordable(currency, amount):
            return False
        self.balances[_currency(currency)] -= amount
        return True

    def credit(self, currency: CurrencyKey, amount: int) -> bool:
        if amount <= 0:
            return False
        self.balances[_currency(currency)] += amount
        return True

    def debit_many(self, costs: Mapping[CurrencyKey, int]) -> bool:
        """Debits every cost or nothing at all."""
        if not self.can_afford(costs):
            return False
        for currency, amount in costs.items():
            if amount > 0:
                self.debit(currency, amount)
        return True

    def credit_many(self, amounts: Mapping[CurrencyKey, int]) -> None:
        for currency, amount in amounts.items():
            self.credit(currency, amount)

    def receive(self, kind: ResultKind, target_id: str, amount: int, quality: CraftingQuality) -> bool:
        """Output sink for currency produced by recipes."""
        if kind != ResultKind.CURRENCY:
            return False
        try:
            currency = CurrencyType(target_id)
        except ValueError:
            Logger.error("CurrencyWallet", f"Cannot credit unknown currency '{target_id}'.")
            return False
        return self.credit(currency, amount)

    def to_dict(self) -> Dict[str, Any]:
        return {c.value: a for c, a in self.balances.items() if a > 0}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CurrencyWallet':
        balances = {}
        for name, amount in data.items():
            try:
                balances[CurrencyType(name)] = int(amount)
            except ValueError:
                Logger.warning("CurrencyWallet", f"Dropping unknown saved currency '{name}'.")
        return cls(balances)
