"""
Signature header decoding and notification signature verification.
"""

from __future__ import annotations

import base64
import json
import math
import re
from decimal import Decimal
from typing import Any, Mapping

import structlog
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from .client import KeyResolver
from .constants import KEY_END, KEY_START
from .errors import MalformedSignatureError, VerificationError
from .models import Config, SignatureEnvelope

logger = structlog.get_logger(__name__)

_KEY_START_GLUED = re.compile(re.escape(KEY_START) + r"(?!\r?\n)")
_KEY_END_GLUED = re.compile(r"(?<!\n)" + re.escape(KEY_END))

_MAX_SAFE_INTEGER = 2**53 - 1


def decode_signature_header(signature_header: str) -> SignatureEnvelope:
    """
    Decode the signature header into a SignatureEnvelope.

    The header is base64-encoded UTF-8 JSON:
      {"alg":"ecdsa","kid":"99345c4b...","signature":"MEUCIQ...","digest":"SHA1"}

    Raises:
        MalformedSignatureError: If the header is not base64, not UTF-8, not a
            JSON object, or lacks a string kid or base64 signature

    Examples:
        >>> header = base64.b64encode(b'{"kid":"k1","signature":"c2ln"}').decode()
        >>> decode_signature_header(header)
        SignatureEnvelope(kid='k1', signature='c2ln', alg=None, digest=None)
    """
    try:
        decoded = base64.b64decode(signature_header, validate=True).decode("utf-8")
        data = json.loads(decoded)
    except (TypeError, ValueError) as e:
        raise MalformedSignatureError(signature_header) from e

    if not isinstance(data, dict):
        raise MalformedSignatureError(signature_header, "not a JSON object")

    kid = data.get("kid")
    signature = data.get("signature")
    if not isinstance(kid, str) or not kid:
        raise MalformedSignatureError(signature_header, "missing kid")
    if not isinstance(signature, str) or not signature:
        raise MalformedSignatureError(signature_header, "missing signature")

    try:
        base64.b64decode(signature, validate=True)
    except ValueError as e:
        raise MalformedSignatureError(signature_header, "signature is not base64") from e

    return SignatureEnvelope(
        kid=kid,
        signature=signature,
        alg=data.get("alg"),
        digest=data.get("digest"),
    )


def format_key(key: str) -> str:
    """
    Put the PEM delimiters on their own lines.

    The key service may return the delimiters glued to the key body.

    Examples:
        >>> format_key("-----BEGIN PUBLIC KEY-----MFkw-----END PUBLIC KEY-----")
        '-----BEGIN PUBLIC KEY-----\\nMFkw\\n-----END PUBLIC KEY-----'
    """
    key = _KEY_START_GLUED.sub(KEY_START + "\n", key, count=1)
    return _KEY_END_GLUED.sub("\n" + KEY_END, key, count=1)


def _js_number(value: float) -> str:
    """Render ``value`` as JavaScript's Number#toString does."""
    if not math.isfinite(value):
        return "null"
    if value == 0:
        return "0"

    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = k + exponent
    sign = "-" if value < 0 else ""

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits

    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def _encode(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, int):
        # JSON.parse reads every number as a double
        if abs(value) > _MAX_SAFE_INTEGER:
            try:
                return _js_number(float(value))
            except OverflowError:
                return "null"
        return int.__repr__(value)
    if isinstance(value, float):
        return _js_number(value)
    if isinstance(value, Mapping):
        members = []
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"keys must be str, not {type(key).__name__}")
            members.append(json.dumps(key, ensure_ascii=False) + ":" + _encode(item))
        return "{" + ",".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_message(message: Mapping[str, Any]) -> bytes:
    """
    Serialize ``message`` to the exact bytes the signer hashed.

    The signer hashes ``JSON.stringify`` of the parsed body: compact JSON with
    keys in insertion order, non-ASCII characters emitted as UTF-8 and numbers
    in JavaScript notation (``10.0`` is ``10``, ``1e-07`` is ``1e-7``,
    ``1e16`` is ``10000000000000000``). Keys must not be sorted.

    Raises:
        TypeError: If ``message`` holds a value JSON cannot represent

    Examples:
        >>> canonical_message({"price": 10.0, "rate": 1e-07})
        b'{"price":10,"rate":1e-7}'
    """
    return _encode(message).encode("utf-8")


def verify_bytes(key_pem: str, signature: bytes, data: bytes) -> bool:
    """
    Verify ``signature`` over ``data`` with SHA-1.

    ECDSA for EC keys, PKCS#1 v1.5 for RSA keys.

    Raises:
        VerificationError: If the key cannot be loaded or is of another type
    """
    try:
        public_key = serialization.load_pem_public_key(key_pem.encode("utf-8"))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise VerificationError(f"Invalid key format: {e}") from e

    try:
        if isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(signature, data, ec.ECDSA(hashes.SHA1()))
        elif isinstance(public_key, rsa.RSAPublicKey):
            public_key.verify(signature, data, padding.PKCS1v15(), hashes.SHA1())
        else:
            raise VerificationError(
                f"Unsupported key type: {type(public_key).__name__}"
            )
    except InvalidSignature:
        return False
    return True


class SignatureVerifier:
    """
    Verifies notification signatures.

    Args:
        resolver: Resolves the key id in the signature header to a public key

    Example:
        >>> verifier = SignatureVerifier(KeyResolver(KeyCache(), TokenProvider()))
        >>> await verifier.verify(message, request.headers["x-ebay-signature"], config)
        True
    """

    def __init__(self, resolver: KeyResolver):
        self.resolver = resolver

    async def verify(
        self,
        message: Mapping[str, Any],
        signature_header: str,
        config: Config,
    ) -> bool:
        """
        Verify that ``message`` was signed by the key named in the header.

        Returns:
            True if the signature matches, False for a well-formed signature
            that does not match

        Raises:
            MalformedSignatureError: If the header cannot be decoded
            UpstreamError: If the key cannot be fetched
            VerificationError: If the check itself fails
        """
        envelope = decode_signature_header(signature_header)
        record = await self.resolver.get_public_key(envelope.kid, config)

        try:
            data = canonical_message(message)
        except (TypeError, ValueError) as e:
            raise VerificationError(f"Message is not JSON serializable: {e}") from e

        verified = verify_bytes(
            format_key(record.key),
            base64.b64decode(envelope.signature),
            data,
        )
        if not verified:
            logger.warning("signature_mismatch", key_id=envelope.kid)
        return verified
