#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

"""Shared fixtures: the mapping table for the a.* host model, a started
bridge context, and a capture of log records."""

import pytest

from mapbridge import BridgeConfig, BridgeContext, Log, LogLevel, MappingTableBuilder, ScriptingApi


CLASSES = {
    "net.game.math.Vector3": "a.b.C",
    "net.game.math.BlockPos": "a.b.P",
    "net.game.entity.Entity": "a.b.D",
    "net.game.entity.Player": "a.b.E",
    "net.game.api.Named": "a.b.F",
    "net.game.api.Ticking": "a.b.G",
    "net.game.item.Stack": "a.b.S",
    "net.game.util.Codec": "a.b.U",
    "net.game.world.Chunk": "a.lazy.L",
    "net.game.world.Broken": "a.broken.X",
}

METHODS = {
    "net.game.math.Vector3": {
        "getX": ["a"], "getY": ["b"], "getZ": ["c"],
        "add": ["d"], "offset": ["i", "j"], "zero": ["z"],
    },
    "net.game.entity.Entity": {
        "health": ["e"], "damage": ["q"], "tick": ["t"], "update": ["r"],
        "secret": ["__p"], "describe": ["y"], "getSelf": ["me"],
        "combine": ["s"], "create": ["x"], "limit": ["l2"],
    },
    "net.game.entity.Player": {"describe": ["yy"]},
    "net.game.api.Named": {"getName": ["u"]},
    "net.game.api.Ticking": {"tick": ["w"]},
    "net.game.item.Stack": {"getCount": ["c"]},
    "net.game.world.Chunk": {"getQ": ["a"]},
    "net.game.util.Codec": {
        "toByte": ["a"], "ints": ["b"], "floats": ["c"], "toInt": ["d"],
        "echo": ["e"], "count": ["f"], "toFloat32": ["g"], "typeName": ["h"],
        "pair": ["k"], "opaque": ["o"],
    },
}

FIELDS = {
    "net.game.math.Vector3": {"x": "f", "y": "g", "z": "h"},
    "net.game.entity.Entity": {
        "health": "h", "name": "n", "id": "o", "label": "v",
        "COUNT": "k", "MAX": "m", "limit": "lim",
    },
    "net.game.item.Stack": {"item": "p", "count": "q2"},
    "net.game.math.BlockPos": {"x": "a", "y": "b"},
}


def buildTable(classes=CLASSES, methods=METHODS, fields=FIELDS):
    builder = MappingTableBuilder()
    for symbolic, runtime in classes.items():
        builder.addClass(symbolic, runtime)
    for cls_name, members in methods.items():
        for key, names in members.items():
            for name in names:
                builder.addMethod(cls_name, key, name)
    for cls_name, members in fields.items():
        for key, name in members.items():
            builder.addField(cls_name, key, name)
    return builder.build()


@pytest.fixture
def table():
    return buildTable()


@pytest.fixture
def config():
    return BridgeConfig()


@pytest.fixture
def ctx(table, config):
    context = BridgeContext(lambda: table, config).init()
    yield context
    context.close()


@pytest.fixture
def api(ctx):
    return ScriptingApi(ctx)


@pytest.fixture
def records():
    """LogRec instances emitted while the test runs."""
    captured = []
    Log.addHandler(captured.append)
    yield captured
    Log.removeHandler(captured.append)


@pytest.fixture(autouse=True)
def resetLogLevel():
    yield
    Log.defaultLevel(LogLevel.INFO)
