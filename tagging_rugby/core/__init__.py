"""Core subsystems: player control, storage and encoding."""
