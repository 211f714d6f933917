"""
Test Fixtures Package

Provides the SQLAlchemy test schema used by database-backed tests.
"""
