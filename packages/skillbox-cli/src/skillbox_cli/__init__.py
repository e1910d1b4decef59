"""Skillbox CLI: the ``skillbox`` command."""
