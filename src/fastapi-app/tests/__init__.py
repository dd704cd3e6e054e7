"""
Tests Package - Spot Price API
==============================

Structure:
- unit/: Unit tests for domain logic, the upstream client and services
- integration/: Integration tests for API endpoints
- conftest.py: Shared fixtures and test configuration
"""
