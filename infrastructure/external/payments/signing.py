"""
PalmPay signature scheme.

Signing is a two-stage legacy scheme and must be reproduced exactly:

1. canonicalize the outbound parameters;
2. MD5 the canonical string and render the digest as UPPERCASE hex;
3. RSA-sign that hex *text* with SHA1withRSA (PKCS#1 v1.5);
4. base64-encode the signature.

Signing the canonical string itself, or the raw digest bytes, produces
signatures the gateway rejects.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from core.logging_config import get_logger
from infrastructure.external.payments.canonical import canonicalize_outbound
from infrastructure.external.payments.exceptions import SignatureEngineFault
from infrastructure.external.payments.keys import KeyMaterial


logger = get_logger(__name__)


class HashAlgorithm(str, Enum):
    SHA1withRSA = "SHA1withRSA"
    SHA256withRSA = "SHA256withRSA"


_HASHES = {
    HashAlgorithm.SHA1withRSA: hashes.SHA1,
    HashAlgorithm.SHA256withRSA: hashes.SHA256,
}

# PKCS#8 / SPKI first, then the PKCS#1 "RSA " variants
_PRIVATE_LABELS = ("PRIVATE KEY", "RSA PRIVATE KEY")
_PUBLIC_LABELS = ("PUBLIC KEY", "RSA PUBLIC KEY")


def md5_upper_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest().upper()


@lru_cache(maxsize=16)
def _load_private_key(key: KeyMaterial) -> rsa.RSAPrivateKey:
    last_exc: Exception | None = None
    for label in _PRIVATE_LABELS:
        try:
            loaded = serialization.load_pem_private_key(
                key.armor(label).encode("ascii"), password=None
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            last_exc = exc
            continue
        if not isinstance(loaded, rsa.RSAPrivateKey):
            raise SignatureEngineFault("Private key is not an RSA key")
        return loaded
    raise SignatureEngineFault(f"Invalid private key: {last_exc}") from last_exc


@lru_cache(maxsize=16)
def _load_public_key(key: KeyMaterial) -> rsa.RSAPublicKey:
    last_exc: Exception | None = None
    for label in _PUBLIC_LABELS:
        try:
            loaded = serialization.load_pem_public_key(key.armor(label).encode("ascii"))
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            last_exc = exc
            continue
        if not isinstance(loaded, rsa.RSAPublicKey):
            raise SignatureEngineFault("Public key is not an RSA key")
        return loaded
    raise SignatureEngineFault(f"Invalid public key: {last_exc}") from last_exc


class SignatureEngine:
    """Computes outbound signatures and verifies inbound ones."""

    def __init__(self, algorithm: HashAlgorithm = HashAlgorithm.SHA1withRSA) -> None:
        self.algorithm = algorithm

    def sign_text(self, text: str, private_key: KeyMaterial) -> str:
        """RSA-sign ``text`` as UTF-8 and return base64."""
        rsa_key = _load_private_key(private_key)
        try:
            raw = rsa_key.sign(text.encode("utf-8"), padding.PKCS1v15(), _HASHES[self.algorithm]())
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise SignatureEngineFault(f"RSA signing failed: {exc}") from exc
        return base64.b64encode(raw).decode("ascii")

    def sign(self, params: Mapping[str, Any], private_key: KeyMaterial) -> str:
        canonical = canonicalize_outbound(params)
        signature = self.sign_text(md5_upper_hex(canonical), private_key)
        logger.debug("palmpay_request_signed", fields=sorted(params), algorithm=self.algorithm.value)
        return signature

    def verify(self, canonical_data: str, signature: str, public_key: KeyMaterial) -> bool:
        """True only on a cryptographic match; bad base64 or mismatch is False.

        A key that cannot be loaded raises SignatureEngineFault instead, since
        that is a configuration error rather than an authentication result.
        """
        rsa_key = _load_public_key(public_key)
        try:
            raw = base64.b64decode(signature, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("palmpay_signature_malformed")
            return False
        try:
            rsa_key.verify(
                raw,
                md5_upper_hex(canonical_data).encode("utf-8"),
                padding.PKCS1v15(),
                _HASHES[self.algorithm](),
            )
        except InvalidSignature:
            return False
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise SignatureEngineFault(f"RSA verification failed: {exc}") from exc
        return True
