"""Column tables of EVM blocks, transactions, logs, traces and state changes."""

__version__ = "0.1.0"

__all__ = ["__version__"]