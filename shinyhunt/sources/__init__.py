"""Roster data sources."""
