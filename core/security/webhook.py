"""GitHub webhook signature verification (``X-Hub-Signature-256``)."""

import hashlib
import hmac

SIGNATURE_HEADER = "x-hub-signature-256"


def sign_payload(secret: str, body: bytes) -> str:
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(secret: str | None, body: bytes, signature: str | None) -> bool:
    """Return True when signature is the sha256 HMAC of body under secret."""
    if not secret or not signature or not signature.startswith("sha256="):
        return False
    return hmac.compare_digest(signature.encode(), sign_payload(secret, body).encode())


__all__ = ["SIGNATURE_HEADER", "sign_payload", "verify_signature"]
