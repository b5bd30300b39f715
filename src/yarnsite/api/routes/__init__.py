"""Routers for the live-reload API."""
