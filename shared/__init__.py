"""
Shared schemas and utilities for the SaaS starter
"""
