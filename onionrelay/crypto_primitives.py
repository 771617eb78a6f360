# Copyright 2024 onionrelay contributors
#
# This file is part of onionrelay.
#
# onionrelay is free software: you can redistribute it and/or modify
# it under the terms of version 3 of the GNU Lesser General Public
# License as published by the Free Software Foundation.
#
# onionrelay is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with onionrelay.  If not, see
# <http://www.gnu.org/licenses/>.
#

"""
This module holds the crypto primitives used to build and peel
onion layers: RSA-OAEP for the per hop symmetric keys and
AES-CBC with an HMAC tag for the layer payloads.
"""

from Cryptodome.Cipher import AES, PKCS1_OAEP
from Cryptodome.Hash import HMAC, SHA256
from Cryptodome.PublicKey import RSA
from Cryptodome.Util.Padding import pad, unpad

from onionrelay.common import RandReader, b64encode, b64decode
from onionrelay.params import DEFAULT_MODULUS_BITS
from onionrelay.errors import KeyGenerationError, KeyImportError
from onionrelay.errors import EncryptionError, DecryptionError


# prefixes which are prefixed to data before hashing
MAC_KEY_HASH_PREFIX = b'\x33'

# AES-256
SYMMETRIC_KEY_SIZE = 32
IV_SIZE = 16
# base64 of a 16 byte IV is always 24 characters
ENCODED_IV_SIZE = 24
MAC_SIZE = 32

RSA_PUBLIC_EXPONENT = 65537


class OnionAsymmetricCipher:
    """
    RSA-OAEP with SHA-256, used to encrypt exactly one
    symmetric key per call.
    """

    def __init__(self, rand_reader=None, modulus_bits=DEFAULT_MODULUS_BITS):
        self.rand_reader = rand_reader or RandReader()
        self.modulus_bits = modulus_bits

    def generate_keypair(self):
        """
        returns a 2-tuple, the public key and the private key
        """
        try:
            private_key = RSA.generate(self.modulus_bits,
                                       randfunc=self.rand_reader.read,
                                       e=RSA_PUBLIC_EXPONENT)
        except (ValueError, TypeError) as err:
            raise KeyGenerationError(str(err)) from err
        return private_key.publickey(), private_key

    def export_public_key(self, key):
        # DER encoded SubjectPublicKeyInfo
        return b64encode(key.publickey().export_key(format='DER'))

    def export_private_key(self, key):
        if key is None:
            return None
        return b64encode(key.export_key(format='DER', pkcs=8))

    def _import_key(self, text):
        try:
            return RSA.import_key(b64decode(text))
        except (ValueError, IndexError, TypeError) as err:
            raise KeyImportError("malformed RSA key encoding") from err

    def import_public_key(self, text):
        return self._import_key(text).publickey()

    def import_private_key(self, text):
        key = self._import_key(text)
        if not key.has_private():
            raise KeyImportError("not a private key")
        return key

    def _oaep(self, key):
        return PKCS1_OAEP.new(key, hashAlgo=SHA256, randfunc=self.rand_reader.read)

    def encrypt(self, plaintext, public_key):
        try:
            return self._oaep(public_key).encrypt(plaintext)
        except (ValueError, TypeError) as err:
            raise EncryptionError(str(err)) from err

    def decrypt(self, ciphertext, private_key):
        try:
            return self._oaep(private_key).decrypt(ciphertext)
        except (ValueError, TypeError) as err:
            raise DecryptionError("RSA decryption failed") from err


class OnionSymmetricCipher:
    """
    AES-256-CBC, encrypt-then-MAC. A ciphertext blob is the base64
    IV followed by the base64 of the ciphertext and its tag.
    """

    def __init__(self, rand_reader=None):
        self.rand_reader = rand_reader or RandReader()

    def generate_key(self):
        return self.rand_reader.read(SYMMETRIC_KEY_SIZE)

    def export_key(self, key):
        return b64encode(key)

    def import_key(self, text):
        try:
            key = b64decode(text)
        except ValueError as err:
            raise KeyImportError("malformed symmetric key encoding") from err
        if len(key) != SYMMETRIC_KEY_SIZE:
            raise KeyImportError("symmetric key must be %d bytes" % SYMMETRIC_KEY_SIZE)
        return key

    def create_mac_key(self, key):
        "Compute a hash of the key to use as the HMAC key"
        return SHA256.new(MAC_KEY_HASH_PREFIX + key).digest()

    def _mac(self, key, data):
        return HMAC.new(self.create_mac_key(key), msg=data, digestmod=SHA256)

    def encrypt(self, key, plaintext):
        """
        encrypt a text payload under key with a fresh random IV.

        :param key: a 32 byte symmetric key.

        :param plaintext: the text to encrypt.

        :returns: the IV and ciphertext blob, a string.
        """
        iv = self.rand_reader.read(IV_SIZE)
        try:
            cipher = AES.new(key, AES.MODE_CBC, iv=iv)
            ciphertext = cipher.encrypt(pad(plaintext.encode('utf-8'), AES.block_size))
        except (ValueError, TypeError, AttributeError) as err:
            raise EncryptionError(str(err)) from err
        tag = self._mac(key, iv + ciphertext).digest()
        return b64encode(iv) + b64encode(ciphertext + tag)

    def decrypt(self, key, blob):
        """
        decrypt a blob produced by encrypt; raises DecryptionError
        if the blob was tampered with or the key is wrong.
        """
        if len(blob) <= ENCODED_IV_SIZE:
            raise DecryptionError("ciphertext is truncated")
        try:
            iv = b64decode(blob[:ENCODED_IV_SIZE])
            body = b64decode(blob[ENCODED_IV_SIZE:])
        except ValueError as err:
            raise DecryptionError("malformed ciphertext encoding") from err
        if len(body) < AES.block_size + MAC_SIZE:
            raise DecryptionError("ciphertext is truncated")
        ciphertext, tag = body[:-MAC_SIZE], body[-MAC_SIZE:]
        try:
            self._mac(key, iv + ciphertext).verify(tag)
        except ValueError as err:
            raise DecryptionError("incorrect MAC") from err
        try:
            cipher = AES.new(key, AES.MODE_CBC, iv=iv)
            plaintext = unpad(cipher.decrypt(ciphertext), AES.block_size)
            return plaintext.decode('utf-8')
        except ValueError as err:
            raise DecryptionError(str(err)) from err
