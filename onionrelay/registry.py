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
The process wide directory of onion routers and their public keys.
"""

import logging
import threading

import attr
import zope.interface

from onionrelay.interfaces import IRegistry


log = logging.getLogger(__name__)


@attr.s(frozen=True, eq=False)
class NodeDescriptor(object):
    """
    I am one directory entry. Entries compare by identity, two
    registrations of the same node id are two different entries.
    """
    node_id = attr.ib(validator=attr.validators.instance_of(int))
    public_key = attr.ib(validator=attr.validators.instance_of(str))


@zope.interface.implementer(IRegistry)
class NodeRegistry(object):
    """
    I am an append only implementation of IRegistry. There is no
    removal and no deduplication by node id.
    """

    def __init__(self):
        self._nodes = []
        self._lock = threading.Lock()

    def register(self, node_id, public_key):
        node = NodeDescriptor(node_id, public_key)
        with self._lock:
            self._nodes.append(node)
        log.info("registered onion router %d", node_id)
        return node

    def list_nodes(self):
        with self._lock:
            return list(self._nodes)

    def get_node_registry(self):
        """
        the directory listing in the shape the registry serves it:
        {"nodes": [{"nodeId": ..., "pubKey": ...}, ...]}
        """
        return {
            "nodes": [{"nodeId": node.node_id, "pubKey": node.public_key}
                      for node in self.list_nodes()],
        }

    def status(self):
        return "live"
