"""Pure training-science calculations. No I/O, no shared state."""
