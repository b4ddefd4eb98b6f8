# backend/tmsdb/apps/lookups/__init__.py
"""Reference data: departments, facilities, designations, salary scales, sponsors."""
