"""
Proof Token
===========
Signed proof that a phone number passed verification.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Optional

from .hashing import hash_phone


class ProofToken:
    """Generates and checks cryptographic proof of successful verification."""

    def __init__(self, secret: str):
        self.secret = secret

    def _sign(self, payload_b64: str) -> str:
        return hmac.new(
            self.secret.encode(),
            payload_b64.encode(),
            hashlib.sha256,
        ).hexdigest()[:32]

    def generate(self, phone_number: str, now: Optional[float] = None) -> str:
        """
        Generate a proof token for a verified phone number.

        Args:
            phone_number: Verified E.164 number
            now: Issue time (epoch seconds), defaults to current time

        Returns:
            Signed proof token
        """
        payload = {
            "ph": hash_phone(phone_number, self.secret)[:16],  # Truncated for privacy
            "ts": int(now if now is not None else time.time()),
            "ver": "1",
        }

        payload_json = json.dumps(payload, separators=(',', ':'))
        payload_b64 = base64.urlsafe_b64encode(payload_json.encode()).decode()

        return f"{payload_b64}.{self._sign(payload_b64)}"

    def verify(
        self,
        token: str,
        phone_number: Optional[str] = None,
        max_age_seconds: int = 3600,
    ) -> Optional[dict]:
        """
        Verify a proof token.

        Args:
            token: The proof token
            phone_number: If given, the token must have been issued for it
            max_age_seconds: Maximum token age

        Returns:
            Payload if valid, None otherwise
        """
        parts = token.split('.')
        if len(parts) != 2:
            return None

        payload_b64, signature = parts
        if not hmac.compare_digest(signature, self._sign(payload_b64)):
            return None

        try:
            payload = json.loads(base64.urlsafe_b64decode(payload_b64).decode())
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None

        if time.time() - payload.get("ts", 0) > max_age_seconds:
            return None

        if phone_number is not None and payload.get("ph") != hash_phone(phone_number, self.secret)[:16]:
            return None

        return payload
