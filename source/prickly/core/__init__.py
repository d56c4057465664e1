"""Core constants, errors, input events and domain pillars."""
