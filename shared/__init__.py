"""
Shared Kernel

Framework-agnostic domain building blocks and the API glue that every
domain app relies on (error taxonomy, exception handler).
"""
