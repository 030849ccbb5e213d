"""
Services Package for the Order Builder
======================================

Available Services:
-------------------
- **session**: In-memory ordering sessions, one cart each, with TTL and
  LRU eviction
"""
