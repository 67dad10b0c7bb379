"""Vigilant - HTTP endpoint availability monitoring."""
