"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer. This is where databases,
exchange and LLM clients, and the scheduler live.
"""
