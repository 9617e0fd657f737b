"""
LocalStore core.

1. STATE (state_store.py)
   - LocalStore: single-owner container for every collection
   - Hydration from durable storage and the readiness gate

2. PERSISTENCE (persistence.py)
   - DebouncedSaver: coalesces mutation bursts into one write
"""
