"""Package operators for executing reconciliation actions.

This module exports the operator that runs cargo invocations.
"""

from crateback.operators.cargo import CargoOperator

__all__ = ["CargoOperator"]
