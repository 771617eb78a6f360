
"""
onionrelay is a library for simulating onion routing networks:
a registry of relays, onion routers which peel one RSA/AES layer
each, and users which send messages through random circuits
"""

from onionrelay._metadata import __version__, __author__, __contact__
from onionrelay._metadata import __license__, __copyright__, __url__

from onionrelay.errors import OnionError, KeyGenerationError, KeyImportError, EncryptionError
from onionrelay.errors import DecryptionError, InsufficientNodesError, InvalidAddressError
from onionrelay.errors import ForwardDeliveryError, AddressInUseError

from onionrelay.params import OnionParams, ADDRESS_WIDTH
from onionrelay.common import RandReader
from onionrelay.crypto_primitives import OnionAsymmetricCipher, OnionSymmetricCipher
from onionrelay.crypto_primitives import SYMMETRIC_KEY_SIZE, IV_SIZE, ENCODED_IV_SIZE
from onionrelay.registry import NodeRegistry, NodeDescriptor
from onionrelay.transport import LocalTransport
from onionrelay.node import OnionLayer, UnwrappedLayer, RouterKeyState, RouterSnapshot
from onionrelay.node import OnionRouter, onion_layer_unwrap, address_decode
from onionrelay.client import OnionUser, build_circuit, create_onion, address_encode
from onionrelay.network import OnionNetwork
from onionrelay.interfaces import IReader, IRegistry, ITransport, IKeyState

__all__ = [
    "ADDRESS_WIDTH",
    "SYMMETRIC_KEY_SIZE",
    "IV_SIZE",
    "ENCODED_IV_SIZE",

    "OnionError",
    "KeyGenerationError",
    "KeyImportError",
    "EncryptionError",
    "DecryptionError",
    "InsufficientNodesError",
    "InvalidAddressError",
    "ForwardDeliveryError",
    "AddressInUseError",

    "IReader",
    "IRegistry",
    "ITransport",
    "IKeyState",

    "OnionParams",
    "RandReader",
    "OnionAsymmetricCipher",
    "OnionSymmetricCipher",
    "NodeRegistry",
    "NodeDescriptor",
    "LocalTransport",
    "OnionLayer",
    "UnwrappedLayer",
    "RouterKeyState",
    "RouterSnapshot",
    "OnionRouter",
    "OnionUser",
    "OnionNetwork",

    "onion_layer_unwrap",
    "build_circuit",
    "create_onion",
    "address_encode",
    "address_decode",

    "__version__", "__author__", "__contact__",
    "__license__", "__copyright__", "__url__",
]
