"""
Feature modules live under this package.

Each module owns its routes, models and SQL, while reusing platform
primitives (config, DB engine/session, logging).
"""
