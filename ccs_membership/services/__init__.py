"""Membership lifecycle services."""
