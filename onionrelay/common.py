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

import base64
import os

import zope.interface

from onionrelay.interfaces import IReader


@zope.interface.implementer(IReader)
class RandReader:

    def read(self, n):
        return os.urandom(n)


def b64encode(data):
    return base64.b64encode(data).decode('ascii')


def b64decode(text):
    """
    strict base64 decoding; raises ValueError on characters
    outside of the base64 alphabet, bad padding or non zero
    padding bits. every byte string has exactly one accepted encoding.
    """
    data = base64.b64decode(text, validate=True)
    if b64encode(data) != text:
        raise ValueError("non-canonical base64 encoding")
    return data
