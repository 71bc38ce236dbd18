"""Exhaustive checks of the bounded value contract."""
