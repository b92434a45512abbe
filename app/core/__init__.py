"""Core application modules: configuration glue, errors, logging, security."""
