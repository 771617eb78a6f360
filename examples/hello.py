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

import logging
import sys

from onionrelay import OnionNetwork, OnionParams


def main():
    logging.basicConfig(level=logging.DEBUG if "-v" in sys.argv else logging.INFO)
    params = OnionParams()

    # Create some nodes and two users
    network = OnionNetwork.launch(params, nb_nodes=5, nb_users=0)
    alice = network.add_user(0)
    bob = network.add_user(7)

    alice.send_message("hello", bob.user_id)

    print("circuit: %s" % alice.get_last_circuit())
    for node_id in alice.get_last_circuit():
        router = network.router(node_id)
        print("node %d forwarded to %d" % (node_id, router.get_last_message_destination()))
    print("bob received: %s" % bob.get_last_received_message())


if __name__ == '__main__':
    main()
