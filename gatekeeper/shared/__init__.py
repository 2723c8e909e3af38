"""Shared: cross-cutting enums, telemetry and small utilities."""
