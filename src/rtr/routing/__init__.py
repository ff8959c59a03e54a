"""Routing — routes, prefix groups, and the first-match router.

Routes are registered during setup, nested through groups, and compiled
into an immutable lookup table when the router freezes.
"""
