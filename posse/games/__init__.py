"""
Games module - Game-specific catalogs and setup.

Each game has its own subpackage with:
- Card, character and role definitions
- Setup: deck building, dealing, role assignment
"""
