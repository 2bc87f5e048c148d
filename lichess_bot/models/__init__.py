"""Typed lichess wire entities.

Everything here is an immutable pydantic model or a string enum; decoding is pure.
"""
