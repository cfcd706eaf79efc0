"""Shared library code for Showdown."""
