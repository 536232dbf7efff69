"""Sync engine core: registry access, resolution, verification, staging."""
