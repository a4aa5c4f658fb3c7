"""Engine package - Merges collected data into the unified port view."""

from portboard.engine.reconcile import ReconciliationEngine, reconcile

__all__ = ["ReconciliationEngine", "reconcile"]
