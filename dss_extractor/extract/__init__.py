"""
Extract Layer - Pure I/O to External Sources

This layer handles all data ingestion with no business logic.
- No imports from transform or load layers
- Reads the identifier input file as raw lines
- Talks to the DataScope Select REST API and returns raw results
"""
