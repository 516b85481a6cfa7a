"""Persistence backends.

- postgres: engine/session lifecycle and upsert constructs for the catalog
- redis: optional TTL cache for the trending terms list

Queries that carry business rules (matching, pricing, visibility) are built
in services, not here.
"""
