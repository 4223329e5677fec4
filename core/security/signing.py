"""Digital signatures for handover documents."""

import hashlib
import hmac
import logging
from datetime import datetime
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "default-secret-change-in-production"


class DocumentSigner:
    """HMAC-SHA256 signer for handover signature steps."""

    def __init__(self, secret: str):
        if not secret or secret == DEFAULT_SECRET:
            logger.warning("Using default signing secret. Set SIGNING_SECRET for production!")
        self._secret = (secret or DEFAULT_SECRET).encode()

    @staticmethod
    def _payload(
        document_id: Union[int, str],
        user_id: Union[int, str],
        role: str,
        signed_at: datetime,
    ) -> bytes:
        return f"{document_id}:{user_id}:{role}:{signed_at.isoformat()}".encode()

    def sign(
        self,
        document_id: Union[int, str],
        user_id: Union[int, str],
        role: str,
        signed_at: datetime,
    ) -> str:
        """
        Sign a document on behalf of a user.

        Args:
            document_id: Handover (or document) identifier
            user_id: Signer's user ID
            role: Signer role ("reach", "buyer")
            signed_at: Signature timestamp

        Returns:
            64-character hex signature
        """
        payload = self._payload(document_id, user_id, role, signed_at)
        return hmac.new(self._secret, payload, hashlib.sha256).hexdigest()

    def verify(
        self,
        signature: str,
        document_id: Union[int, str],
        user_id: Union[int, str],
        role: str,
        signed_at: datetime,
    ) -> bool:
        """Check a signature in constant time."""
        if not signature or len(signature) != 64:
            return False
        expected = self.sign(document_id, user_id, role, signed_at)
        return hmac.compare_digest(signature, expected)
