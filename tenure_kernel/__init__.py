"""
Tenure Kernel

Shared infrastructure for the tenure benefit reconciliation engine:
typed exceptions, structured logging, the injectable clock and the
SQLAlchemy base used by the checkpoint store.
"""

__version__ = "0.1.0"
