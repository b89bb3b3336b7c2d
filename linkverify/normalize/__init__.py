"""
Field normalization modules for LinkVerify.

Handles phonetic encoding, edit-distance similarity, and the per-field-type
cleanup applied to sensitive values before they are hashed.
"""
