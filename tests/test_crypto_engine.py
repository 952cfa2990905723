"""
Unit tests for the crypto engine.

Tests:
- Key pair generation
- Shared-key agreement symmetry and known answers
- Authenticated encryption round trip and tamper detection
- Public-key fingerprints
"""

import os

import pytest

from securepipe.core.crypto_engine import (
    HashCrypto, KeyPair, SharedKey, SharedKeyDeriver, load_public_key,
)
from securepipe.errors import DecryptionError, HandshakeError


# NaCl / RFC 7748 Curve25519 vectors
ALICE_PRIVATE = bytes.fromhex(
    "77076d0a7318a57d3c16c17251b26645df4c2f87ebc0992ab177fba51db92c2a")
ALICE_PUBLIC = bytes.fromhex(
    "8520f0098930a754748b7ddcb43ef75a0dbf3a0d26381af4eba4a98eaa9b4e6a")
BOB_PRIVATE = bytes.fromhex(
    "5dab087e624a8a4b79e17f8b83800ee66f3bb1292618b6fd1c2f8b27ff88e0eb")
BOB_PUBLIC = bytes.fromhex(
    "de9edb7d7b7dc1b4d35b61c2ece435373f8343c85b78674dadfc7e146f882b4f")
BOX_BEFORENM = bytes.fromhex(
    "1b27556473e985d462cd51197a9a46c76009549eac6474f206c4ee0844f68389")


class TestKeyPair:

    def test_generate_sizes(self):
        kp = KeyPair.generate()
        assert len(kp.public_bytes) == 32
        assert len(kp.private_bytes) == 32

    def test_fresh_pairs_differ(self):
        assert KeyPair.generate().public_bytes != KeyPair.generate().public_bytes

    def test_generate_draws_from_random_source(self):
        kp = KeyPair.generate(random=lambda n: ALICE_PRIVATE)
        assert kp.private_bytes == ALICE_PRIVATE
        assert kp.public_bytes == ALICE_PUBLIC

    def test_short_random_source_rejected(self):
        with pytest.raises(ValueError):
            KeyPair.generate(random=lambda n: b"\x01" * (n - 1))

    def test_repr_hides_private_key(self):
        kp = KeyPair.from_private_bytes(ALICE_PRIVATE)
        assert ALICE_PRIVATE.hex() not in repr(kp)

    def test_load_public_key_wrong_length(self):
        with pytest.raises(ValueError):
            load_public_key(b"\x00" * 31)


class TestSharedKeyDeriver:

    def test_symmetry(self, alice, bob):
        ab = SharedKeyDeriver.derive(alice, bob.public_key)
        ba = SharedKeyDeriver.derive(bob, alice.public_key)
        assert bytes(ab) == bytes(ba)
        assert len(bytes(ab)) == 32

    def test_accepts_raw_bytes(self, alice, bob):
        from_objects = SharedKeyDeriver.derive(alice, bob.public_key)
        from_bytes = SharedKeyDeriver.derive(alice.private_bytes, bob.public_bytes)
        assert bytes(from_objects) == bytes(from_bytes)

    def test_different_peers_different_keys(self, alice, bob):
        carol = KeyPair.generate()
        assert (bytes(SharedKeyDeriver.derive(alice, bob.public_key))
                != bytes(SharedKeyDeriver.derive(alice, carol.public_key)))

    def test_known_answer(self):
        assert bytes(SharedKeyDeriver.derive(ALICE_PRIVATE, BOB_PUBLIC)) == BOX_BEFORENM
        assert bytes(SharedKeyDeriver.derive(BOB_PRIVATE, ALICE_PUBLIC)) == BOX_BEFORENM

    @pytest.mark.parametrize("peer_key", [
        b"\x00" * 32,
        b"\x01" + b"\x00" * 31,
    ], ids=["zero", "order-4"])
    def test_low_order_key_rejected(self, alice, peer_key):
        with pytest.raises(HandshakeError):
            SharedKeyDeriver.derive(alice, peer_key)


class TestSharedKey:

    @pytest.mark.parametrize("plaintext", [
        b"",
        b"hello world\n",
        b"\x00" * 100,
        os.urandom(4096),
    ])
    def test_round_trip(self, shared_key, plaintext):
        nonce = os.urandom(24)
        ciphertext = shared_key.encrypt(plaintext, nonce)
        assert len(ciphertext) == len(plaintext) + 16
        assert shared_key.decrypt(ciphertext, nonce) == plaintext

    def test_peer_decrypts(self, alice, bob):
        nonce = os.urandom(24)
        ciphertext = SharedKeyDeriver.derive(alice, bob.public_key).encrypt(b"hi", nonce)
        assert SharedKeyDeriver.derive(bob, alice.public_key).decrypt(ciphertext, nonce) == b"hi"

    def test_every_single_bit_flip_detected(self, shared_key):
        nonce = os.urandom(24)
        ciphertext = shared_key.encrypt(b"hello world\n", nonce)
        for i in range(len(ciphertext) * 8):
            tampered = bytearray(ciphertext)
            tampered[i // 8] ^= 1 << (i % 8)
            with pytest.raises(DecryptionError):
                shared_key.decrypt(bytes(tampered), nonce)

    def test_wrong_nonce_fails(self, shared_key):
        ciphertext = shared_key.encrypt(b"secret", b"\x01" * 24)
        with pytest.raises(DecryptionError):
            shared_key.decrypt(ciphertext, b"\x02" * 24)

    def test_wrong_key_fails(self, shared_key):
        nonce = os.urandom(24)
        ciphertext = shared_key.encrypt(b"secret", nonce)
        other = SharedKey.from_bytes(os.urandom(32))
        with pytest.raises(DecryptionError):
            other.decrypt(ciphertext, nonce)

    def test_truncated_ciphertext_fails(self, shared_key):
        nonce = os.urandom(24)
        ciphertext = shared_key.encrypt(b"secret", nonce)
        with pytest.raises(DecryptionError):
            shared_key.decrypt(ciphertext[:10], nonce)

    def test_from_bytes_interoperates(self, shared_key):
        copy = SharedKey.from_bytes(bytes(shared_key))
        nonce = os.urandom(24)
        assert copy.decrypt(shared_key.encrypt(b"x", nonce), nonce) == b"x"

    def test_from_bytes_wrong_length(self):
        with pytest.raises(ValueError):
            SharedKey.from_bytes(b"\x00" * 16)


class TestHashCrypto:

    def test_fingerprint_format(self):
        fp = HashCrypto.fingerprint(ALICE_PUBLIC)
        assert len(fp.split(":")) == 8
        assert fp == HashCrypto.sha256(ALICE_PUBLIC)[:8].hex(":")

    def test_fingerprint_distinguishes_keys(self):
        assert HashCrypto.fingerprint(ALICE_PUBLIC) != HashCrypto.fingerprint(BOB_PUBLIC)
