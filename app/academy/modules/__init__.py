"""
Feature modules live under this package.

Each module owns its blueprint (admin.py) and the form/payload shaping for
its entity (service.py), while reusing platform primitives (auth guard,
API client, audit trail).
"""
