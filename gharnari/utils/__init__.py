"""
Ghar Nari - Utilities Package
=============================

Shared helpers for files, timestamps, and background tasks.
"""
