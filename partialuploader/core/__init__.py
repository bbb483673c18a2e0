"""Core chunk transfer engine: storage, sessions, receiver and sender."""
