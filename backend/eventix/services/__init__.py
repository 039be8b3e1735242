"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services talk to storage only through the RegistryFacade
    - Services talk to the ledger only through the LedgerGateway
"""
