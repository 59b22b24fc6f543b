"""
Ledger Package.
Tracks held material quantities with stack caps, plus the currency wallet.
"""
from .material import Material
from .core import MaterialLedger
from .wallet import CurrencyWallet
