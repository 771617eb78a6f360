#!/usr/bin/env python

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

"""
This module includes the peeling of onion layers and the
onion router which relays the peeled remainder to the next hop.
"""

import logging
import threading

import zope.interface
import attr

from onionrelay.common import RandReader, b64decode
from onionrelay.params import ADDRESS_WIDTH
from onionrelay.interfaces import IKeyState, IRegistry, ITransport
from onionrelay.crypto_primitives import OnionAsymmetricCipher, OnionSymmetricCipher
from onionrelay.errors import DecryptionError, InvalidAddressError, ForwardDeliveryError


log = logging.getLogger(__name__)


def address_decode(s):
    """
    Split the fixed width address off the front of s.
    Returns the numeric address and the remainder of the input string.
    """
    head = s[:ADDRESS_WIDTH]
    if len(head) != ADDRESS_WIDTH or not (head.isascii() and head.isdigit()):
        raise InvalidAddressError("expected a %d digit address" % ADDRESS_WIDTH)
    return int(head, 10), s[ADDRESS_WIDTH:]


@attr.s(frozen=True)
class OnionLayer(object):
    """
    One hop's worth of the onion: the RSA encrypted symmetric key,
    fixed length, followed by the symmetric encrypted payload.
    """
    encrypted_key = attr.ib(validator=attr.validators.instance_of(str))
    encrypted_payload = attr.ib(validator=attr.validators.instance_of(str))

    def to_wire(self):
        return self.encrypted_key + self.encrypted_payload

    @classmethod
    def from_wire(cls, params, blob):
        """
        Split a wire payload given an instance of OnionParams.
        """
        size = params.encrypted_key_size
        if not isinstance(blob, str) or len(blob) <= size:
            raise DecryptionError("onion layer is truncated")
        return cls(blob[:size], blob[size:])


@attr.s(frozen=True)
class UnwrappedLayer(object):
    """
    I am the returned result of calling `onion_layer_unwrap`.
    """
    next_hop = attr.ib(validator=attr.validators.instance_of(int))
    payload = attr.ib(validator=attr.validators.instance_of(str))


@zope.interface.implementer(IKeyState)
@attr.s(frozen=True)
class RouterKeyState(object):

    public_key = attr.ib()
    private_key = attr.ib(default=None)

    def get_public_key(self):
        return self.public_key

    def get_private_key(self):
        return self.private_key


def onion_layer_unwrap(params, key_state, blob):
    """
    onion_layer_unwrap performs the decryption operation for routers.
    the symmetric key is recovered with the router's private key,
    the payload is decrypted and the next hop address is split off.

    :param OnionParams params: An instance of OnionParams.

    :param key_state: An IKeyState provider.

    :param str blob: the onion as it arrived on the wire.

    :returns: an UnwrappedLayer.
    """
    assert IKeyState.providedBy(key_state)

    layer = OnionLayer.from_wire(params, blob)
    private_key = key_state.get_private_key()
    if private_key is None:
        raise DecryptionError("no private key to peel with")
    try:
        encrypted_key = b64decode(layer.encrypted_key)
    except ValueError as err:
        raise DecryptionError("malformed encrypted key encoding") from err
    asymmetric = OnionAsymmetricCipher()
    symmetric = OnionSymmetricCipher()
    key = asymmetric.decrypt(encrypted_key, private_key)
    plaintext = symmetric.decrypt(key, layer.encrypted_payload)
    try:
        next_hop, payload = address_decode(plaintext)
    except InvalidAddressError as err:
        raise DecryptionError("layer does not start with a next hop address") from err
    return UnwrappedLayer(next_hop=next_hop, payload=payload)


@attr.s(frozen=True)
class RouterSnapshot(object):
    """
    what a router last saw; replaced as a whole for every peeled message
    """
    last_received_encrypted_message = attr.ib(default=None)
    last_received_decrypted_message = attr.ib(default=None)
    last_message_source = attr.ib(default=None)
    last_message_destination = attr.ib(default=None)


class OnionRouter(object):
    """
    I am a relay node. I hold an RSA keypair, register my public
    key with the registry and relay whatever is left after peeling
    my layer to the address found inside it.
    """

    def __init__(self, node_id, params, registry, transport, key_state=None, rand_reader=None):
        assert IRegistry.providedBy(registry)
        assert ITransport.providedBy(transport)
        self.node_id = node_id
        self.params = params
        self.registry = registry
        self.transport = transport
        self.address = params.router_address(node_id)
        self.asymmetric = OnionAsymmetricCipher(rand_reader or RandReader(), params.modulus_bits)
        if key_state is None:
            public_key, private_key = self.asymmetric.generate_keypair()
            key_state = RouterKeyState(public_key, private_key)
        self.key_state = key_state
        self._snapshot = RouterSnapshot()
        self._lock = threading.Lock()

    def start(self):
        public_key = self.asymmetric.export_public_key(self.key_state.get_public_key())
        self.transport.listen(self.address, self.receive)
        self.registry.register(self.node_id, public_key)
        log.info("onion router %d is listening on %d", self.node_id, self.address)

    def receive(self, payload):
        """
        peel one layer and forward the remainder. decryption errors
        propagate to the caller and leave my state untouched; a failed
        forward is logged and dropped.
        """
        unwrapped = onion_layer_unwrap(self.params, self.key_state, payload)
        with self._lock:
            self._snapshot = RouterSnapshot(
                last_received_encrypted_message=payload,
                last_received_decrypted_message=unwrapped.payload,
                last_message_source=self.node_id,
                last_message_destination=unwrapped.next_hop,
            )
        log.debug("onion router %d forwarding to %d", self.node_id, unwrapped.next_hop)
        try:
            self.transport.send(unwrapped.next_hop, unwrapped.payload)
        except ForwardDeliveryError as err:
            log.warning("onion router %d could not forward to %d: %s",
                        self.node_id, unwrapped.next_hop, err)
        return "success"

    def snapshot(self):
        with self._lock:
            return self._snapshot

    def status(self):
        return "live"

    def get_last_received_encrypted_message(self):
        return self.snapshot().last_received_encrypted_message

    def get_last_received_decrypted_message(self):
        return self.snapshot().last_received_decrypted_message

    def get_last_message_source(self):
        return self.snapshot().last_message_source

    def get_last_message_destination(self):
        return self.snapshot().last_message_destination

    def get_private_key(self):
        return self.asymmetric.export_private_key(self.key_state.get_private_key())
