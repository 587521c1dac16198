"""
Core modules for True Budget.

This package contains the budget engine: pay period resolution,
recurring cost proration, goal contributions and spending totals.
"""
