"""Rate resolution, ledger synchronization, validation and document composition."""
from prodflow.engine.rates import resolve_rate
from prodflow.engine.synchronizer import synchronize
from prodflow.engine.validator import validate_ledger, ledger_totals
from prodflow.engine.composer import compose_draft, resolve_firm_for_shoot

__all__ = [
    "resolve_rate",
    "synchronize",
    "validate_ledger",
    "ledger_totals",
    "compose_draft",
    "resolve_firm_for_shoot",
]
