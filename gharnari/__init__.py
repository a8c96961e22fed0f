"""
Ghar Nari - Storage Engine
==========================

File-backed, schema-validated document store for a single-author blog,
with local backups, retention, restore and a daily backup schedule.
"""

__version__ = "1.0.0"
