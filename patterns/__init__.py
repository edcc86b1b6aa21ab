"""Reusable patterns the library vertical is built from.

Each module is a self-contained pattern that can be adapted to another
record type: a pure-function rules engine and an async repository layer.
"""
