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

import zope.interface


class IRegistry(zope.interface.Interface):
    """
    I am an onion router directory interface. I'm only concerned
    with the node ids and public keys of the relays.
    """

    def register(self, node_id, public_key):
        """
        append a node id and its exported public key to the directory.
        registering the same node id twice adds a second entry.
        """

    def list_nodes(self):
        """
        return a snapshot of the directory in insertion order
        -> [NodeDescriptor]
        """


class ITransport(zope.interface.Interface):
    """
    I am a one-way message passing interface. Participants are
    reachable at a numeric address and nothing is sent back to the
    sender beyond the handler's acknowledgement.
    """

    def listen(self, address, handler):
        """
        deliver payloads sent to address to the handler callable
        """

    def send(self, address, payload):
        """
        deliver payload to whatever listens on address; raises
        ForwardDeliveryError if it could not be delivered.
        """


class IKeyState(zope.interface.Interface):
    """
    key state interface providers getters from public and private keys
    """

    def get_public_key(self):
        """
        return the RSA public key
        """

    def get_private_key(self):
        """
        return the RSA private key, or None
        """


class IReader(zope.interface.Interface):
    """
    i'm an interface used for bytes for generating key material.
    this assists our writing of deterministic unit tests.
    """

    def read(self, n):
        """
        return n bytes
        """
