"""Message encryption/decryption with the process-wide RSA key pair."""

import base64
import logging
from functools import lru_cache

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from chatvault.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# OAEP with SHA-1 for both the digest and MGF1 is the default RSA padding of
# the Node.js crypto module; keeping it keeps existing ciphertext readable.
_OAEP_HASH_SIZE = hashes.SHA1.digest_size


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA1()),
        algorithm=hashes.SHA1(),
        label=None,
    )


class MessageCipher:
    """Stateless public-key encrypt / private-key decrypt of message text.

    Holds only the immutable key pair, so a single instance can be shared by
    any number of concurrent requests.
    """

    def __init__(self, public_key_pem: str, private_key_pem: str):
        public_key = serialization.load_pem_public_key(public_key_pem.encode())
        private_key = serialization.load_pem_private_key(private_key_pem.encode(), password=None)

        if not isinstance(public_key, rsa.RSAPublicKey) or not isinstance(
            private_key, rsa.RSAPrivateKey
        ):
            raise ValueError("Message keys must be an RSA key pair")
        if public_key.public_numbers() != private_key.public_key().public_numbers():
            raise ValueError("Message public key does not match the private key")

        self._public_key = public_key
        self._private_key = private_key

    @classmethod
    def from_settings(cls, settings: Settings) -> "MessageCipher":
        """Build the cipher from configured PEM key material."""
        return cls(settings.message_public_key, settings.message_private_key)

    @property
    def key_size(self) -> int:
        """RSA modulus size in bits."""
        return self._public_key.key_size

    @property
    def max_plaintext_bytes(self) -> int:
        """Largest UTF-8 payload a single OAEP block can carry."""
        return self._public_key.key_size // 8 - 2 * _OAEP_HASH_SIZE - 2

    def encrypt(self, plaintext: str) -> str:
        """Encrypt message text.

        Args:
            plaintext: Message text to encrypt.

        Returns:
            Base64-encoded ciphertext.

        Raises:
            ValueError: If the encoded text exceeds ``max_plaintext_bytes``.
        """
        encrypted = self._public_key.encrypt(plaintext.encode("utf-8"), _oaep())
        return base64.b64encode(encrypted).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt base64-encoded ciphertext produced by ``encrypt``.

        Raises:
            ValueError: If the ciphertext is malformed or was produced with a
                different key.
        """
        decrypted = self._private_key.decrypt(base64.b64decode(ciphertext, validate=True), _oaep())
        return decrypted.decode("utf-8")


@lru_cache
def get_message_cipher() -> MessageCipher:
    """Get the process-wide cipher, built once from settings."""
    cipher = MessageCipher.from_settings(get_settings())
    logger.info(f"Loaded {cipher.key_size}-bit message encryption key pair")
    return cipher
