
import binascii

import pytest
import zope.interface
from Cryptodome.Cipher import ChaCha20

from onionrelay import IReader, RandReader, OnionAsymmetricCipher, OnionSymmetricCipher
from onionrelay import KeyGenerationError, KeyImportError, EncryptionError, DecryptionError
from onionrelay import SYMMETRIC_KEY_SIZE, ENCODED_IV_SIZE
from onionrelay.common import b64encode, b64decode


@zope.interface.implementer(IReader)
class ChachaNoiseReader():
    """
    hello, i am an entropy "iterator". key generation uses a source
    of entropy; i'm deterministic so use me to write deterministic tests.
    """
    def __init__(self, seed_string):
        assert isinstance(seed_string, str) and len(seed_string) == 64
        self.cipher = ChaCha20.new(key=binascii.unhexlify(seed_string), nonce=b"\x00" * 8)

    def read(self, n):
        return self.cipher.encrypt(b"\x00" * n)


SEED = "47ade5905376604cde0b57e732936b4298281c8a67b6a62c6107482eb69e2941"


def test_chacha_noise_reader():
    rand_reader = ChachaNoiseReader(SEED)
    r = rand_reader.read(32)
    assert r == binascii.unhexlify("feedc80ac8ab0e7cb9beb86eb9a3cd16455204c964aedb628df25e54d58fe4a0")


class TestAsymmetricCipher():

    def setup_method(self):
        self.cipher = OnionAsymmetricCipher(RandReader(), modulus_bits=1024)
        self.public_key, self.private_key = self.cipher.generate_keypair()

    def test_encrypt_decrypt(self):
        key = b"K" * SYMMETRIC_KEY_SIZE
        ciphertext = self.cipher.encrypt(key, self.public_key)
        assert len(ciphertext) == 128
        assert self.cipher.decrypt(ciphertext, self.private_key) == key

    def test_default_modulus_size(self):
        cipher = OnionAsymmetricCipher()
        public_key, private_key = cipher.generate_keypair()
        assert public_key.size_in_bits() == 2048
        ciphertext = cipher.encrypt(b"K" * SYMMETRIC_KEY_SIZE, public_key)
        assert len(b64encode(ciphertext)) == 344

    def test_generate_keypair_is_deterministic_given_the_reader(self):
        a = OnionAsymmetricCipher(ChachaNoiseReader(SEED), modulus_bits=1024)
        b = OnionAsymmetricCipher(ChachaNoiseReader(SEED), modulus_bits=1024)
        assert a.export_public_key(a.generate_keypair()[0]) == b.export_public_key(b.generate_keypair()[0])

    def test_generate_keypair_too_small(self):
        cipher = OnionAsymmetricCipher(RandReader(), modulus_bits=512)
        pytest.raises(KeyGenerationError, cipher.generate_keypair)

    def test_export_import(self):
        exported_public = self.cipher.export_public_key(self.public_key)
        exported_private = self.cipher.export_private_key(self.private_key)
        assert isinstance(exported_public, str)
        assert isinstance(exported_private, str)
        public_key = self.cipher.import_public_key(exported_public)
        private_key = self.cipher.import_private_key(exported_private)
        assert public_key == self.public_key
        ciphertext = self.cipher.encrypt(b"hello", public_key)
        assert self.cipher.decrypt(ciphertext, private_key) == b"hello"

    def test_export_public_key_of_private_key(self):
        assert self.cipher.export_public_key(self.private_key) == self.cipher.export_public_key(self.public_key)

    def test_export_missing_private_key(self):
        assert self.cipher.export_private_key(None) is None

    def test_import_malformed(self):
        pytest.raises(KeyImportError, self.cipher.import_public_key, "not base64!")
        pytest.raises(KeyImportError, self.cipher.import_public_key, b64encode(b"not a key"))
        pytest.raises(KeyImportError, self.cipher.import_private_key, "")

    def test_import_private_key_rejects_public_key(self):
        exported_public = self.cipher.export_public_key(self.public_key)
        pytest.raises(KeyImportError, self.cipher.import_private_key, exported_public)

    def test_encrypt_too_long(self):
        # 1024 bit modulus with OAEP/SHA-256 holds at most 62 bytes
        pytest.raises(EncryptionError, self.cipher.encrypt, b"A" * 63, self.public_key)
        self.cipher.encrypt(b"A" * 62, self.public_key)

    def test_decrypt_wrong_key(self):
        other_public_key, other_private_key = self.cipher.generate_keypair()
        ciphertext = self.cipher.encrypt(b"hello", self.public_key)
        pytest.raises(DecryptionError, self.cipher.decrypt, ciphertext, other_private_key)

    def test_decrypt_with_public_key(self):
        ciphertext = self.cipher.encrypt(b"hello", self.public_key)
        pytest.raises(DecryptionError, self.cipher.decrypt, ciphertext, self.public_key)

    def test_decrypt_corrupted(self):
        ciphertext = bytearray(self.cipher.encrypt(b"hello", self.public_key))
        ciphertext[10] ^= 0x01
        pytest.raises(DecryptionError, self.cipher.decrypt, bytes(ciphertext), self.private_key)
        pytest.raises(DecryptionError, self.cipher.decrypt, bytes(ciphertext[:-1]), self.private_key)


class TestSymmetricCipher():

    def setup_method(self):
        self.cipher = OnionSymmetricCipher(RandReader())
        self.key = self.cipher.generate_key()

    def test_generate_key(self):
        assert len(self.key) == SYMMETRIC_KEY_SIZE
        assert self.cipher.generate_key() != self.key

    def test_export_import(self):
        exported = self.cipher.export_key(self.key)
        assert len(exported) == 44
        assert self.cipher.import_key(exported) == self.key

    def test_import_malformed(self):
        pytest.raises(KeyImportError, self.cipher.import_key, "***")
        pytest.raises(KeyImportError, self.cipher.import_key, b64encode(b"short"))

    def test_encrypt_decrypt(self):
        blob = self.cipher.encrypt(self.key, "the quick brown fox")
        assert isinstance(blob, str)
        assert len(b64decode(blob[:ENCODED_IV_SIZE])) == 16
        assert self.cipher.decrypt(self.key, blob) == "the quick brown fox"

    def test_encrypt_decrypt_unicode(self):
        message = "été ☃ \U0001f600"
        assert self.cipher.decrypt(self.key, self.cipher.encrypt(self.key, message)) == message

    def test_encrypt_decrypt_empty(self):
        assert self.cipher.decrypt(self.key, self.cipher.encrypt(self.key, "")) == ""

    def test_fresh_iv_per_call(self):
        first = self.cipher.encrypt(self.key, "hello")
        second = self.cipher.encrypt(self.key, "hello")
        assert first != second
        assert first[:ENCODED_IV_SIZE] != second[:ENCODED_IV_SIZE]
        assert self.cipher.decrypt(self.key, first) == self.cipher.decrypt(self.key, second) == "hello"

    def test_encrypt_bad_key(self):
        pytest.raises(EncryptionError, self.cipher.encrypt, b"short", "hello")

    def test_decrypt_wrong_key(self):
        blob = self.cipher.encrypt(self.key, "hello")
        pytest.raises(DecryptionError, self.cipher.decrypt, self.cipher.generate_key(), blob)

    def test_decrypt_tampered_ciphertext(self):
        blob = self.cipher.encrypt(self.key, "the quick brown fox jumps over the lazy dog")
        iv, body = blob[:ENCODED_IV_SIZE], bytearray(b64decode(blob[ENCODED_IV_SIZE:]))
        for i in range(len(body)):
            tampered = bytearray(body)
            tampered[i] ^= 0x80
            pytest.raises(DecryptionError, self.cipher.decrypt, self.key, iv + b64encode(bytes(tampered)))

    def test_decrypt_tampered_iv(self):
        blob = self.cipher.encrypt(self.key, "hello")
        iv = bytearray(b64decode(blob[:ENCODED_IV_SIZE]))
        iv[0] ^= 0x01
        pytest.raises(DecryptionError, self.cipher.decrypt, self.key, b64encode(bytes(iv)) + blob[ENCODED_IV_SIZE:])

    def test_decrypt_truncated(self):
        blob = self.cipher.encrypt(self.key, "hello")
        pytest.raises(DecryptionError, self.cipher.decrypt, self.key, blob[:ENCODED_IV_SIZE])
        pytest.raises(DecryptionError, self.cipher.decrypt, self.key, blob[:-8])
        pytest.raises(DecryptionError, self.cipher.decrypt, self.key, "")

    def test_decrypt_not_base64(self):
        blob = self.cipher.encrypt(self.key, "hello")
        pytest.raises(DecryptionError, self.cipher.decrypt, self.key, blob[:30] + "!" + blob[31:])

    def test_decrypt_non_canonical_iv(self):
        # the last data character of the IV carries four padding bits
        blob = self.cipher.encrypt(self.key, "hello")
        last = ENCODED_IV_SIZE - 3
        assert blob[last + 1:ENCODED_IV_SIZE] == "=="
        letters = BASE64_LETTERS
        bumped = letters[letters.index(blob[last]) ^ 1]
        tampered = blob[:last] + bumped + blob[last + 1:]
        pytest.raises(DecryptionError, self.cipher.decrypt, self.key, tampered)


BASE64_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def test_b64decode_canonical():
    assert b64decode("AA==") == b"\x00"
    assert b64decode("AAE=") == b"\x00\x01"
    assert b64decode("") == b""
    assert b64decode(b64encode(b"hello world")) == b"hello world"


def test_b64decode_rejects_non_zero_padding_bits():
    pytest.raises(ValueError, b64decode, "AB==")
    pytest.raises(ValueError, b64decode, "AAF=")


def test_b64decode_rejects_malformed():
    pytest.raises(ValueError, b64decode, "A")
    pytest.raises(ValueError, b64decode, "AA")
    pytest.raises(ValueError, b64decode, "A=A=")
    pytest.raises(ValueError, b64decode, "AA==\n")
    pytest.raises(ValueError, b64decode, "AA!=")
