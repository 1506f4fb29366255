"""
Symmetric encryption for stored app configuration.

App configuration documents hold third-party API keys and secrets. They are
stored as a single Fernet token; unlike password hashing (Argon2) this is
reversible so pipelines can read the credentials back.

Key Derivation:
- HKDF with SHA256 derives a stable 32-byte Fernet key from SECRET_KEY
- Same SECRET_KEY → same Fernet key, so configs survive restarts
- Changing SECRET_KEY makes every stored config undecryptable

Usage:
    from dashboard.core.encryption import encrypt_document, decrypt_document

    stored = encrypt_document({"music": {"lastFmKey": "..."}})
    config = decrypt_document(stored)
"""
import base64
import json
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from dashboard.core.config import settings
from dashboard.core.logging_config import log_error

_fernet_key_cache: Optional[bytes] = None


def _get_fernet_key() -> bytes:
    """Derive (once) the Fernet key from the application's SECRET_KEY."""
    global _fernet_key_cache

    if _fernet_key_cache is not None:
        return _fernet_key_cache

    if not settings.secret_key:
        raise ValueError(
            "SECRET_KEY must be set for encryption. "
            "Set it in your .env file or environment variables."
        )

    kdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,  # Fernet requires exactly 32 bytes
        salt=None,  # SECRET_KEY is already high-entropy
        info=b'dashboard-app-config-encryption'
    )
    derived_key = kdf.derive(settings.secret_key.encode('utf-8'))

    # Fernet expects a URL-safe base64-encoded 32-byte key
    _fernet_key_cache = base64.urlsafe_b64encode(derived_key)
    return _fernet_key_cache


def _get_fernet() -> Fernet:
    return Fernet(_get_fernet_key())


def encrypt_document(document: Dict[str, Any]) -> str:
    """Serialize a JSON-compatible mapping and encrypt it."""
    try:
        payload = json.dumps(document, separators=(",", ":"), sort_keys=True).encode('utf-8')
        return _get_fernet().encrypt(payload).decode('utf-8')
    except Exception as e:
        log_error(e, action="config_encryption")
        raise


def decrypt_document(encrypted: str) -> Dict[str, Any]:
    """
    Decrypt a document produced by encrypt_document.

    Raises:
        ValueError: If the token is empty, corrupted, or SECRET_KEY changed.
    """
    if not encrypted or not encrypted.strip():
        raise ValueError("Cannot decrypt empty document")

    try:
        decrypted = _get_fernet().decrypt(encrypted.encode('utf-8'))
    except InvalidToken as e:
        log_error(e, action="config_decryption")
        raise ValueError(
            "Failed to decrypt app configuration. This may indicate the stored "
            "value is corrupted or the SECRET_KEY has changed. "
            "Re-enter the integration settings to fix it."
        ) from e

    document = json.loads(decrypted.decode('utf-8'))
    if not isinstance(document, dict):
        raise ValueError("Decrypted app configuration is not a mapping")
    return document


def reset_key_cache():
    """
    Reset the cached Fernet key.

    Only needed in tests or if SECRET_KEY changes at runtime.
    """
    global _fernet_key_cache
    _fernet_key_cache = None
