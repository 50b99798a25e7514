"""Authenticated, cached client and CSV exporter for Bitso withdrawals and fundings."""

__version__ = "0.1.0"
