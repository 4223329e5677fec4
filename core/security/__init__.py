from .signing import DocumentSigner

__all__ = ["DocumentSigner"]
