"""Bookings app package.

This app encapsulates the booking domain: the booking record with its
financial breakdown, the availability query that keeps confirmed stays
from overlapping, the public availability check and the historical CSV
import. Creation runs the conflict check and the insert in one database
transaction holding a lock on the accommodation row.
"""
