"""Logging and metrics for simconsole."""
