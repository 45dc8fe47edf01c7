"""
Portfolio bounded context, domain layer.

This module contains all domain logic for the portfolio context:
- Wallet ledger (USDT deposits and withdrawals)
- Position ledger (weighted-average cost buys and sells)
- Price alert rules and notification lifecycle
- Portfolio valuation and ledger audit
"""
