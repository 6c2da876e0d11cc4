"""
Test Fixtures and Utilities

Record builders and fake gateways for reconciliation tests. All figures are
synthetic.
"""
