"""Polling, moderation and session wiring."""
