"""Gatekeeper user-management API."""
