"""Tests package for the Revnet simulation.

Covers the seeded random streams, pool and Revnet pricing, venue routing,
the day loop, configuration handling, metrics and the CLI. Tests run
without external dependencies for fast execution.
"""
