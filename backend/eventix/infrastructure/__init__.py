"""Infrastructure Layer — registry adapters, ledger client, logging.

Invariants:
    - Every external call is bounded by a timeout and mapped to core/errors.py
    - Store adapters satisfy core/repository_protocols.RegistryStore
"""
