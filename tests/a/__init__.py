#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

# Obfuscated host object model used by the test suite.  Class and member
# names are meaningless on purpose; tests reach them through the mapping
# table built in conftest.py.
