"""
Load Layer - Data Persistence and Reporting

This layer handles all output operations.
- Output CSV and error log files (append-only)
- Console reports of extraction results and notes
- Optional raw snapshots (Parquet, JSON)
"""
