"""
RSA key handling: OAEP wrapping, PEM loading, key ids
=====================================================
The asymmetric half of the codec. RSA only ever encrypts the per-message
symmetric key, never the payload itself.

Padding: OAEP with the same digest for the label hash and MGF1
(SHA-256 by default). PKCS#1 v1.5 and raw RSA are not offered.

Key id: first 8 bytes of SHA-256 over the DER SubjectPublicKeyInfo,
hex encoded. Both halves of a keypair map to the same id, so a
Decoder can pick the right private key without trying each one.

Dependencies: cryptography >= 41.0
"""

import logging
from typing import Dict, Iterable, List, Tuple, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import KeyUnwrapError, KeyWrapError

logger = logging.getLogger(__name__)

KEY_ID_BYTES = 8

PublicKeyLike  = Union[rsa.RSAPublicKey, bytes, str]
PrivateKeyLike = Union[rsa.RSAPrivateKey, bytes, str]


def generate_keypair(bits: int = 2048) -> Tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    """Generate an RSA keypair (public exponent 65537). For tests and demos."""
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=bits,
    )
    return private_key, private_key.public_key()


def export_public_pem(public_key: rsa.RSAPublicKey) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo
    )


def export_private_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    return private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption()
    )


def load_public_key(key: PublicKeyLike) -> rsa.RSAPublicKey:
    """Accept an RSA public key object or its PEM encoding."""
    if isinstance(key, str):
        key = key.encode("ascii", errors="replace")
    if isinstance(key, bytes):
        try:
            key = serialization.load_pem_public_key(key)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise KeyWrapError(f"Could not load public key: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyWrapError(f"Expected an RSA public key, got {type(key).__name__}.")
    return key


def load_private_key(key: PrivateKeyLike, password: bytes = None) -> rsa.RSAPrivateKey:
    """Accept an RSA private key object or its PEM encoding."""
    if isinstance(key, str):
        key = key.encode("ascii", errors="replace")
    if isinstance(key, bytes):
        try:
            key = serialization.load_pem_private_key(key, password=password)
        except (ValueError, TypeError, UnsupportedAlgorithm):
            logger.warning("Private key PEM could not be loaded")
            raise KeyUnwrapError() from None
    if not isinstance(key, rsa.RSAPrivateKey):
        logger.warning("Private key is %s, not RSA", type(key).__name__)
        raise KeyUnwrapError()
    return key


def key_id(key: Union[rsa.RSAPublicKey, rsa.RSAPrivateKey]) -> str:
    """Stable short identifier for either half of a keypair."""
    if isinstance(key, rsa.RSAPrivateKey):
        key = key.public_key()
    der = key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo
    )
    digest = hashes.Hash(hashes.SHA256())
    digest.update(der)
    return digest.finalize()[:KEY_ID_BYTES].hex()


class KeyWrapper:
    """RSA-OAEP wrapping of per-message symmetric keys."""

    def __init__(self, algorithm: hashes.HashAlgorithm = None):
        self._algorithm = algorithm or hashes.SHA256()

    @property
    def algorithm(self) -> hashes.HashAlgorithm:
        return self._algorithm

    def _oaep(self) -> padding.OAEP:
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=self._algorithm),
            algorithm=self._algorithm,
            label=None
        )

    def wrap(self, public_key: rsa.RSAPublicKey, sym_key: bytearray) -> bytes:
        """
        Encrypt the symmetric key under the recipient's public key.
        Max input is modulus_bytes - 2 * digest_size - 2.
        """
        try:
            return public_key.encrypt(bytes(sym_key), self._oaep())
        except ValueError as exc:
            raise KeyWrapError(
                f"RSA-{public_key.key_size} cannot wrap a {len(sym_key)} byte key "
                f"with OAEP-{self._algorithm.name}: {exc}"
            ) from exc

    def unwrap(self, private_key: rsa.RSAPrivateKey, wrapped: bytes) -> bytearray:
        """
        Recover the symmetric key. Every failure becomes the same
        KeyUnwrapError with no chained cause.
        """
        try:
            return bytearray(private_key.decrypt(wrapped, self._oaep()))
        except ValueError:
            raise KeyUnwrapError() from None


class KeyRing:
    """Private keys indexed by key id."""

    def __init__(self, private_keys: Iterable[PrivateKeyLike] = ()):
        self._keys: Dict[str, rsa.RSAPrivateKey] = {}
        for key in private_keys:
            self.add(key)

    def add(self, private_key: PrivateKeyLike, password: bytes = None) -> str:
        private_key = load_private_key(private_key, password=password)
        kid = key_id(private_key)
        self._keys[kid] = private_key
        logger.debug("KeyRing: added RSA-%d key %s", private_key.key_size, kid)
        return kid

    def get(self, kid: str) -> rsa.RSAPrivateKey:
        try:
            return self._keys[kid]
        except KeyError:
            raise KeyUnwrapError() from None

    @property
    def key_ids(self) -> List[str]:
        return sorted(self._keys)

    def __contains__(self, kid) -> bool:
        return kid in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self):
        return f"KeyRing({len(self)} keys)"
