"""Variant Engine.

Combinatorial core of the product editor: generates attribute combinations,
reconciles saved variants against a changed selection, applies merge
policies, derives pack variants and decides provisional rejection.
"""

__version__ = "0.1.0"
