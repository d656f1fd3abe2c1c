"""Utility modules for circbuf."""

from circbuf.utils.logging import BufferLogger, BufferStats, configure_logging, reset_logging

__all__ = ["BufferLogger", "BufferStats", "configure_logging", "reset_logging"]
