"""Domain layer — weekdays, recurrence rules, and the date searches.

This layer depends only on stdlib, pydantic, and python-dateutil.
It must never import from services or config.
"""
