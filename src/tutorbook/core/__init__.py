"""Core configuration, errors and clock abstractions."""
