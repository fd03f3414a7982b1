"""
Signature Engine
==================
Parameter canonicalization + HMAC signing for signed gateways.

Two canonicalization strategies, not interchangeable:
  sorted_query      keys sorted, values URL-encoded   (redirect gateway)
  fixed_order_raw   protocol field order, raw values  (JSON-body gateway)
"""

import enum
import hashlib
import hmac
import urllib.parse
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from common.exceptions import ConfigurationError


class HashAlgorithm(str, enum.Enum):
    SHA256 = "sha256"
    SHA512 = "sha512"


_DIGESTS = {
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def canonicalize(params: Mapping[str, str]) -> List[Tuple[str, str]]:
    """Entries sorted by key ascending. Values are stringified, not encoded."""
    return [(key, str(params[key])) for key in sorted(params)]


def sorted_query(params: Mapping[str, str]) -> str:
    """Sorted key=value pairs joined by '&', values form-encoded (space -> '+')."""
    return "&".join(
        f"{key}={urllib.parse.quote_plus(value)}" for key, value in canonicalize(params)
    )


def fixed_order_raw(params: Mapping[str, str], field_order: Sequence[str]) -> str:
    """key=value pairs in the given order, no encoding. Every field must be present."""
    missing = [name for name in field_order if name not in params]
    if missing:
        raise KeyError(f"missing signature fields: {', '.join(missing)}")
    return "&".join(f"{name}={params[name]}" for name in field_order)


def sign(canonical: str, secret: str, algorithm: HashAlgorithm) -> str:
    """Hex-encoded HMAC of the canonical string."""
    if not secret:
        raise ConfigurationError("Signing secret is not configured")
    digest = _DIGESTS[HashAlgorithm(algorithm)]
    return hmac.new(secret.encode("utf-8"), canonical.encode("utf-8"), digest).hexdigest()


@dataclass
class SignedParameterSet:
    """
    Provider parameters plus the signature derived from them.
    Call seal() once all parameters are final; further changes are rejected.
    """
    params: Dict[str, str] = field(default_factory=dict)
    signature: Optional[str] = None

    def set(self, key: str, value) -> None:
        if self.signature is not None:
            raise ValueError("parameter set already signed")
        self.params[key] = str(value)

    def pairs(self) -> List[Tuple[str, str]]:
        return canonicalize(self.params)

    def query(self) -> str:
        return sorted_query(self.params)

    def seal(self, secret: str, algorithm: HashAlgorithm) -> str:
        self.signature = sign(self.query(), secret, algorithm)
        return self.signature
