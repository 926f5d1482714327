"""Accommodations app package.

Owns the holiday homes themselves, their photo galleries and the date
ranges an administrator blocks off for maintenance or personal use.
"""
