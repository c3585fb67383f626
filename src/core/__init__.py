"""Core domain package for chirp.

Core contains content parsing, aggregation, the derived-view cache and query
composition without any storage or transport-specific code, keeping the
business logic portable.
"""
