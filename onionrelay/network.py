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
Wire a registry, a transport, routers and users together
inside one process.
"""

import logging

from onionrelay.common import RandReader
from onionrelay.registry import NodeRegistry
from onionrelay.transport import LocalTransport
from onionrelay.node import OnionRouter
from onionrelay.client import OnionUser


log = logging.getLogger(__name__)


class OnionNetwork(object):

    def __init__(self, params, registry=None, transport=None, rand_reader=None):
        self.params = params
        self.registry = registry or NodeRegistry()
        self.transport = transport or LocalTransport()
        self.rand_reader = rand_reader or RandReader()
        self.routers = {}
        self.users = {}

    @classmethod
    def launch(cls, params, nb_nodes, nb_users, rand_reader=None):
        """
        Start routers 0..nb_nodes-1 and users 0..nb_users-1.

        :param OnionParams params: An instance of OnionParams.

        :param rand_reader: Source of entropy, an IReader provider.

        :returns: an OnionNetwork.
        """
        network = cls(params, rand_reader=rand_reader)
        for node_id in range(nb_nodes):
            network.add_router(node_id)
        for user_id in range(nb_users):
            network.add_user(user_id)
        log.info("launched %d onion routers and %d users", nb_nodes, nb_users)
        return network

    def add_router(self, node_id, key_state=None):
        router = OnionRouter(node_id, self.params, self.registry, self.transport,
                             key_state=key_state, rand_reader=self.rand_reader)
        router.start()
        self.routers[node_id] = router
        return router

    def add_user(self, user_id):
        user = OnionUser(user_id, self.params, self.registry, self.transport,
                         rand_reader=self.rand_reader)
        user.start()
        self.users[user_id] = user
        return user

    def router(self, node_id):
        return self.routers[node_id]

    def user(self, user_id):
        return self.users[user_id]
