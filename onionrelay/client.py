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

import logging
import threading

from onionrelay.common import RandReader, b64encode
from onionrelay.params import ADDRESS_WIDTH
from onionrelay.interfaces import IRegistry, ITransport
from onionrelay.crypto_primitives import OnionAsymmetricCipher, OnionSymmetricCipher
from onionrelay.node import OnionLayer
from onionrelay.errors import EncryptionError, InsufficientNodesError, InvalidAddressError
from onionrelay.errors import ForwardDeliveryError


log = logging.getLogger(__name__)


def address_encode(address):
    """
    encode a numeric address as a zero padded decimal string
    of exactly ADDRESS_WIDTH characters
    """
    if isinstance(address, bool) or not isinstance(address, int) or address < 0:
        raise InvalidAddressError("address must be a non negative integer")
    encoded = "%0*d" % (ADDRESS_WIDTH, address)
    if len(encoded) != ADDRESS_WIDTH:
        raise InvalidAddressError("address %d is wider than %d digits" % (address, ADDRESS_WIDTH))
    return encoded


def build_circuit(nodes, length, rand_reader):
    """
    Return a list of length random entries of the directory
    snapshot nodes (without replacement).
    """
    nodes = list(nodes)
    if len(nodes) < length:
        raise InsufficientNodesError(
            "a circuit of %d hops needs at least %d nodes, the directory has %d" % (
                length, length, len(nodes)))
    # Randomize the order of the entries by sorting on a random key
    keyed = [(rand_reader.read(8), i) for i in range(len(nodes))]
    keyed.sort(key=lambda x: x[0])
    # Return the first length entries of the randomized list
    return [nodes[i] for _, i in keyed[:length]]


def create_onion(params, circuit, destination, message, rand_reader):
    """
    Onion encrypt a message for a circuit.

    :param OnionParams params: An instance of OnionParams.

    :param circuit: A list of NodeDescriptor, entry hop first.

    :param int destination: The numeric address of the receiving user.

    :param str message: The plaintext message.

    :param rand_reader: Source of entropy, an IReader provider.

    :returns: the onion to send to the first hop of the circuit, a string.
    """
    asymmetric = OnionAsymmetricCipher(rand_reader, params.modulus_bits)
    symmetric = OnionSymmetricCipher(rand_reader)

    content = message
    next_hop = destination
    # Wrap from the exit hop backwards to the entry hop
    for node in reversed(circuit):
        key = symmetric.generate_key()
        encrypted_payload = symmetric.encrypt(key, address_encode(next_hop) + content)
        public_key = asymmetric.import_public_key(node.public_key)
        encrypted_key = b64encode(asymmetric.encrypt(key, public_key))
        if len(encrypted_key) != params.encrypted_key_size:
            raise EncryptionError("public key of node %d is not a %d bit key" % (
                node.node_id, params.modulus_bits))
        content = OnionLayer(encrypted_key, encrypted_payload).to_wire()
        next_hop = params.router_address(node.node_id)
    return content


class OnionUser(object):
    """
    I am a user endpoint. I send messages through random circuits
    and keep the last message delivered to me.
    """

    def __init__(self, user_id, params, registry, transport, rand_reader=None):
        assert IRegistry.providedBy(registry)
        assert ITransport.providedBy(transport)
        self.user_id = user_id
        self.params = params
        self.registry = registry
        self.transport = transport
        self.rand_reader = rand_reader or RandReader()
        self.address = params.user_address(user_id)
        self._last_sent_message = None
        self._last_circuit = []
        self._received = {}
        self._lock = threading.Lock()

    def start(self):
        self.transport.listen(self.address, self.receive)
        log.info("user %d is listening on %d", self.user_id, self.address)

    def receive(self, message):
        with self._lock:
            self._received[self.user_id] = message
        log.debug("user %d received a message", self.user_id)
        return "success"

    def send_message(self, message, destination_user_id):
        circuit = build_circuit(self.registry.list_nodes(),
                                self.params.circuit_length,
                                self.rand_reader)
        destination = self.params.user_address(destination_user_id)
        onion = create_onion(self.params, circuit, destination, message, self.rand_reader)
        with self._lock:
            self._last_sent_message = message
            self._last_circuit = circuit
        entry = self.params.router_address(circuit[0].node_id)
        log.info("user %d sending to user %d through %s", self.user_id, destination_user_id,
                 [node.node_id for node in circuit])
        try:
            self.transport.send(entry, onion)
        except ForwardDeliveryError as err:
            log.warning("user %d could not reach entry node %d: %s",
                        self.user_id, circuit[0].node_id, err)
        return "success"

    def status(self):
        return "live"

    def get_last_sent_message(self):
        with self._lock:
            return self._last_sent_message

    def get_last_received_message(self):
        with self._lock:
            return self._received.get(self.user_id)

    def get_last_circuit(self):
        with self._lock:
            return [node.node_id for node in self._last_circuit]
