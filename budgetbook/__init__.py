"""Budgetbook: shared household and business budgeting workspaces."""

__version__ = "1.0.0"
