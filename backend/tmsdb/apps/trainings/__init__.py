# backend/tmsdb/apps/trainings/__init__.py
"""
Trainings app

Programme offerings plus their transfers, budgets and reports.
"""
