"""Marketplace services.

Routes stay thin and delegate here: search & ranking, catalog publishing,
store management, authentication and counters. Functions that take an
AsyncSession run inside the caller's transaction; the others open their own.
"""
