import base64
import hashlib
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from flowvault.config import settings


def _get_fernet(secret_key: Optional[str] = None) -> Fernet:
    # Fernet wants 32 url-safe base64 bytes; SECRET_KEY may be any length.
    key = (secret_key or settings.SECRET_KEY).encode()
    return Fernet(base64.urlsafe_b64encode(hashlib.sha256(key).digest()))


def encrypt_string(raw: str, secret_key: Optional[str] = None) -> str:
    """
    Seals a string with a Fernet key derived from the application SECRET_KEY.
    """
    if not raw:
        return raw
    return _get_fernet(secret_key).encrypt(raw.encode()).decode()


def decrypt_string(enc: str, secret_key: Optional[str] = None) -> str:
    """
    Unseals a string sealed with encrypt_string.

    Input that is not a valid token (for example a plaintext store) is
    returned unchanged.
    """
    if not enc:
        return enc
    try:
        return _get_fernet(secret_key).decrypt(enc.encode()).decode()
    except (InvalidToken, ValueError):
        return enc
