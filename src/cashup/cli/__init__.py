"""
Command Line Interface Package

Unified CLI for counting, submitting and reviewing cash-ups.

Command Structure:
- cashup: Main entry point with utility commands (version, config)
- cashup stations: Show, check and initialize the register/terminal layout
- cashup reconcile: Interactive step-by-step cash-up with autosave
- cashup calc / submit: Work from a draft file
- cashup review: Manager list, approve, reject, edit and export
- cashup sync: Deliver records waiting in the outbox
"""
