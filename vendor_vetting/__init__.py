"""Vendor Vetting — AI vendor risk assessment and approval workflow."""

__version__ = "1.0.0"
