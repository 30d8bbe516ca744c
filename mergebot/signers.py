"""
Key holders for GitHub App JWTs.

GitHub Apps authenticate with RS256 JWTs, so RSA is the only algorithm
supported. Tokens themselves are encoded by ``mergebot.signing``.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


class Signer(ABC):
    """Abstract base class for JWT signing keys."""

    algorithm: str

    @property
    @abstractmethod
    def signing_key(self) -> str:
        """The private key in the form the JWT encoder accepts (PEM)."""
        pass

    @classmethod
    @abstractmethod
    def from_pem_file(cls, path: str | Path) -> "Signer":
        """Load a signer from a PEM file."""
        pass

    @classmethod
    @abstractmethod
    def from_pem(cls, pem_string: str) -> "Signer":
        """Load a signer from a PEM string."""
        pass


class RSASigner(Signer):
    """RS256 key for GitHub App private keys."""

    algorithm = "RS256"

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        """
        Initialize with an RSA private key.

        Args:
            private_key: RSA private key from cryptography library
        """
        self._private_key = private_key
        self._public_key = private_key.public_key()
        self._pem = self.private_key_pem()

    @property
    def signing_key(self) -> str:
        return self._pem

    def public_key_pem(self) -> str:
        """Return the public key in PEM format."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()

    def private_key_pem(self) -> str:
        """Return the private key in PEM format (for storage)."""
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()

    @classmethod
    def from_pem_file(cls, path: str | Path) -> "RSASigner":
        """
        Load an RSA signer from a PEM file (the key downloaded from the App settings).

        Args:
            path: Path to PEM file containing the RSA private key

        Returns:
            RSASigner instance
        """
        return cls.from_pem(Path(path).read_text())

    @classmethod
    def from_pem(cls, pem_string: str) -> "RSASigner":
        """
        Load an RSA signer from a PEM string.

        Args:
            pem_string: PEM-encoded RSA private key (PKCS#1 or PKCS#8)

        Returns:
            RSASigner instance

        Raises:
            TypeError: If the key is not an RSA key
        """
        private_key = serialization.load_pem_private_key(
            pem_string.encode(), password=None
        )

        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise TypeError(f"Expected RSA private key, got {type(private_key).__name__}")

        return cls(private_key)

    @classmethod
    def generate(cls, key_size: int = 2048) -> "RSASigner":
        """Generate a new RSA keypair (for tests and local development)."""
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        return cls(private_key)
