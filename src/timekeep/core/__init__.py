"""Pure time-entry rules."""
