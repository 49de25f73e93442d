"""Data models shared across simconsole."""
