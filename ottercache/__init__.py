"""Thread-safe building blocks for an in-memory cache: maps, buffers, queues, timers and loaders."""

__version__ = "0.1.0"