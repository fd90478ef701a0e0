"""Core infrastructure: configuration, storage, encryption and errors."""
