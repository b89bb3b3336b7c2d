"""
Bloom filter primitives for LinkVerify.

Provides the fixed-size probabilistic membership set that every record is
encoded into before comparison.
"""
