"""Services layer - external integrations.

This module is organized into subpackages:
- bitso/: Bitso withdrawals and fundings client, signing and CSV export
- shared/: Shared utilities (HTTP base client, response cache)
"""
