"""Ticket archive CLI."""
