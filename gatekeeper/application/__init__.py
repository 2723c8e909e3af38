"""Application layer: DTOs, interfaces (ports) and engine services."""
