from .scheduler import JobManager

__all__ = ["JobManager"]
