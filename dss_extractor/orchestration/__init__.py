"""
Orchestration Layer - Workflow Coordination

This layer coordinates the extraction workflow.
- Pure workflow coordination
- No business logic
- Composes extract, transform, and load operations
"""
