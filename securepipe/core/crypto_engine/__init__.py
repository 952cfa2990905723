"""
SecurePipe crypto engine: key pairs, shared-key derivation and
fingerprints.
"""

from .hash_crypto import HashCrypto
from .key_pair    import KeyPair, load_public_key
from .shared_key  import SharedKey, SharedKeyDeriver

__all__ = [
    "HashCrypto",
    "KeyPair", "load_public_key",
    "SharedKey", "SharedKeyDeriver",
]
