"""Command-line interface for RosterDesk."""
