# backend/tmsdb/apps/allowances/__init__.py
"""Allowances paid to participants, and the type/status catalogues they use."""
