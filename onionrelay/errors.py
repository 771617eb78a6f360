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
error classes for onion construction, peeling and delivery
"""


class OnionError(Exception):
    pass


# key handling errors

class KeyGenerationError(OnionError):
    pass


class KeyImportError(OnionError):
    pass


# cipher errors

class EncryptionError(OnionError):
    pass


class DecryptionError(OnionError):
    pass


# client errors

class InsufficientNodesError(OnionError):
    pass


class InvalidAddressError(OnionError):
    pass


# transport errors

class ForwardDeliveryError(OnionError):
    pass


class AddressInUseError(OnionError):
    pass
