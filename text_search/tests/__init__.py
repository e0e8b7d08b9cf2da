"""
Tests Module: Unit Tests

Test Coverage:
    - CountedSet / CountedMultiset (queries, mutation, set algebra, clone)
    - Posting aggregation helpers
    - Core types, errors and configuration
    - Structured logging
    - CLI
"""
