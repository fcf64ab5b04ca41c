"""Configuration, logging and time utilities for the waitlist engine."""
