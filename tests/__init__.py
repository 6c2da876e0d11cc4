"""
Test Suite for Cash-Up

Test Structure:
- fixtures/: Shared record builders and fake gateways
- unit/: Unit tests mirroring src/ package structure
- integration/: CLI and end-to-end workflow tests
"""
