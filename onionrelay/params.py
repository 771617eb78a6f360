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
This module is used to parameterize the onion network:
circuit length, RSA modulus size and the base addresses
of the registry, the routers and the users.
"""

import attr


# every address inside an onion layer is this many decimal digits
ADDRESS_WIDTH = 10

REGISTRY_PORT = 8080
BASE_ONION_ROUTER_PORT = 4000
BASE_USER_PORT = 3000

DEFAULT_CIRCUIT_LENGTH = 3
DEFAULT_MODULUS_BITS = 2048


def is_positive(instance, attribute, value):
    """
    validator for a strictly positive integer
    """
    if value < 1:
        raise ValueError("%s must be positive" % attribute.name)


def is_not_negative(instance, attribute, value):
    if value < 0:
        raise ValueError("%s must not be negative" % attribute.name)


def is_modulus_size(instance, attribute, value):
    """
    validator for an RSA modulus size that can carry
    an OAEP padded symmetric key
    """
    if value < 1024 or value % 256 != 0:
        raise ValueError("modulus_bits must be a multiple of 256, at least 1024")


@attr.s(frozen=True)
class OnionParams(object):

    circuit_length = attr.ib(default=DEFAULT_CIRCUIT_LENGTH,
                             validator=[attr.validators.instance_of(int), is_positive])
    modulus_bits = attr.ib(default=DEFAULT_MODULUS_BITS,
                           validator=[attr.validators.instance_of(int), is_modulus_size])
    registry_port = attr.ib(default=REGISTRY_PORT,
                            validator=[attr.validators.instance_of(int), is_not_negative])
    base_router_port = attr.ib(default=BASE_ONION_ROUTER_PORT,
                               validator=[attr.validators.instance_of(int), is_not_negative])
    base_user_port = attr.ib(default=BASE_USER_PORT,
                             validator=[attr.validators.instance_of(int), is_not_negative])

    @property
    def modulus_size(self):
        """
        size in bytes of one RSA ciphertext block
        """
        return self.modulus_bits // 8

    @property
    def encrypted_key_size(self):
        """
        i am the length of the base64 encoded, RSA encrypted
        symmetric key at the start of every onion layer.
        e.g. 2048 bit modulus == 256 byte block == 344 characters
        """
        return 4 * ((self.modulus_size + 2) // 3)

    def router_address(self, node_id):
        return self.base_router_port + node_id

    def user_address(self, user_id):
        return self.base_user_port + user_id
