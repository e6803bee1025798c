"""
compdoc test suite.

- Unit tests for discovery, building, watching and navigation
- Integration tests running whole sites from a temporary directory
"""
