"""
Cryptographically-secure random value generators.
"""

import secrets

from nacl.utils import random as nacl_random


class SecureRandom:

    @staticmethod
    def generate_bytes(length: int) -> bytes:
        return nacl_random(length)

    @staticmethod
    def generate_session_id() -> str:
        return secrets.token_hex(16)
