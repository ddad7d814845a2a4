"""Quarterly Calc command-line interface."""
