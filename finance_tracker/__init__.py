"""
Finance Tracker - Source Package

The data layer of a single-user personal finance tracker: a record store
for transactions and settings, aggregations for dashboards and charts,
CSV import/export and input validation.

DESIGN PRINCIPLES:
1. Plain data in, plain data out (no UI references)
2. Validation errors are returned, never raised at the user
3. Every mutation rewrites the full collection
4. Every mutation is auditable
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
