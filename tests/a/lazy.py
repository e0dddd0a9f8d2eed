#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

# net.game.world.Chunk; importing this module is the class's static
# initialization, so tests check it stays out of sys.modules until used.


class L:
    LOADED = True

    def __init__(self, q: int = 0):
        self.q = q

    def a(self) -> int:
        return self.q
