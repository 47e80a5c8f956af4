"""
Decryption of carrier credentials stored in carrier_settings.

Credentials are kept encrypted with Fernet; the key is derived from SECRET_KEY.
Callers receive plaintext only for the duration of a quote.
"""
import base64
from typing import Optional, Protocol

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from src.config import settings
from src.logger import setup_logger


_ENCRYPTION_SALT = b'intelipost_carrier_credentials_v1'

logger = setup_logger('encryption')


class SecretResolver(Protocol):
    def decrypt(self, ciphertext: Optional[str]) -> Optional[str]:
        ...


def derive_fernet(secret_key: str) -> Fernet:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=_ENCRYPTION_SALT,
        iterations=100000,
    )
    key = base64.urlsafe_b64encode(kdf.derive(secret_key.encode()))
    return Fernet(key)


class FernetSecretResolver:
    def __init__(self, secret_key: Optional[str] = None):
        self._fernet = derive_fernet(secret_key or settings.SECRET_KEY)

    def encrypt(self, plaintext: str) -> str:
        if not plaintext:
            return ''
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: Optional[str]) -> Optional[str]:
        """
        Returns None for empty or undecryptable values so the caller can treat
        the credential as missing.
        """
        if not ciphertext:
            return None

        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken:
            logger.error("Failed to decrypt stored credential: invalid token")
            return None
