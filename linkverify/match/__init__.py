"""
Matching engine for LinkVerify.

Implements salted hashing of sensitive fields, per-record Bloom filter
construction, and Jaccard scoring of candidate records against a query.
"""
