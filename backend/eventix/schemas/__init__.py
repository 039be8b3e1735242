"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Wire field names are camelCase (ticketType, walletAddress, mintAddress)
    - Schemas are API contracts; core entities are the domain representation
"""
