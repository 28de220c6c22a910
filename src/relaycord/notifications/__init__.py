"""Webhook notifications for bot status, loader and error events."""
