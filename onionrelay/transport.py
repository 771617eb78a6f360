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

import logging
import threading

import zope.interface

from onionrelay.interfaces import ITransport
from onionrelay.errors import OnionError, ForwardDeliveryError, AddressInUseError


log = logging.getLogger(__name__)


@zope.interface.implementer(ITransport)
class LocalTransport(object):
    """
    I am an in-process implementation of ITransport that
    hands payloads straight to the handler listening on
    the destination address.
    """

    def __init__(self):
        self.handlers = {}
        self._lock = threading.Lock()

    def listen(self, address, handler):
        with self._lock:
            if address in self.handlers:
                raise AddressInUseError("address %d is already in use" % address)
            self.handlers[address] = handler
        log.debug("listening on %d", address)

    def send(self, address, payload):
        with self._lock:
            handler = self.handlers.get(address)
        if handler is None:
            raise ForwardDeliveryError("nothing is listening on %d" % address)
        try:
            return handler(payload)
        except OnionError as err:
            log.error("handler on %d rejected the payload: %s", address, err)
            raise ForwardDeliveryError("delivery to %d failed" % address) from err
