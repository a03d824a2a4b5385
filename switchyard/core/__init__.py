"""Core infrastructure: configuration, errors, audit, status and escalation."""
