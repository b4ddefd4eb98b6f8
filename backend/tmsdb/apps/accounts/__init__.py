# backend/tmsdb/apps/accounts/__init__.py
"""
Accounts app

Responsible for:
- Back-office user accounts and role membership
- Login, registration and password change (`/api/auth`)
"""
