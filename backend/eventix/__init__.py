"""Eventix Ticket Engine — issuance, listing and resale of minted event tickets.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
