"""Core contracts, errors and pipeline orchestration."""
