"""
Infrastructure adapters for the portfolio bounded context.

Each adapter implements a domain port (ABC): the SQL ledger and
notification stores, the Binance price gateway, the OpenRouter
commentary generator, plus the APScheduler job that drives alerts.
"""
