"""
Feature modules for the Eventory backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- repository.py: Supabase data access
- service.py: Business logic implementation
- routes.py: FastAPI route handlers (events, feature_requests)
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
"""
