"""Blackstar command line interface."""
