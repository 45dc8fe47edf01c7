"""
HTTP interface for the portfolio bounded context.

Routers for the ledger, market data and alerts, their Pydantic
schemas, and the dependency wiring that builds use cases.
"""
