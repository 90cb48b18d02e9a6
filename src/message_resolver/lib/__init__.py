"""Core library modules: exceptions, JSON strategies, type conversion and logging."""
