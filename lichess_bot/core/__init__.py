"""Context values threaded into every bot callback.

Kept free of HTTP concerns so they can be built directly in tests.
"""
