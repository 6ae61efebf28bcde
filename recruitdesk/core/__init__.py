"""
Core business logic for coach search and export.

This module is framework-agnostic - it doesn't import FastAPI, Snowflake,
or any infrastructure concerns. Data access goes through the protocols in
`coaches.directory` and `campaigns.stores`.
"""
