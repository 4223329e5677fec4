from .termii import TermiiSmsClient

__all__ = ["TermiiSmsClient"]
