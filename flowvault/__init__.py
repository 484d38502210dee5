"""flowvault - grouped secrets and configuration for message flows."""

__version__ = "0.1.0"
