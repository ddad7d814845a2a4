"""Quarterly Calc - estimated tax planning for self-employed households."""

__version__ = "0.3.0"
