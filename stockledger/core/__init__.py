"""Core domain layer: entities, exceptions, interfaces and pure rules."""
