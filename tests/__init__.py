"""Test suite for iconmatrix.

Test Structure:
- unit/: Unit tests per package area (canvas, config, generation, transport, utils, cli)
- conftest.py: Shared fixtures (in-memory canvas, channel, engine, PNG payloads)
"""
