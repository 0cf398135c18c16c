"""Core infrastructure: configuration, logging, storage, mail and tokens."""
