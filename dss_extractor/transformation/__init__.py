"""
Transformation Layer - Pure, Deterministic Functions

This layer contains all business logic.
- Pure functions (input → output)
- No file or network I/O
- Unit testable
- Deterministic results
"""
