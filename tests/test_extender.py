#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

"""Tests for extend(): generated subclasses, overrides, addons and _super."""

import pytest

from mapbridge import (AmbiguousOverrideErr, ArgErr, ConstructionErr, ExtendedInstanceProxy,
                       Extender, MemberNotFoundErr, ProxyKind, UnsupportedErr, unwrap)
from mapbridge.Extender import GENERATED_MODULE
from a.b import D, G


@pytest.fixture
def Entity(api):
    return api.importSymbol("net.game.entity.Entity")


@pytest.fixture
def Ticking(api):
    return api.importSymbol("net.game.api.Ticking")


class TestExtend:
    """Test defining extensions."""

    def test_override_called_from_script(self, api, Entity) -> None:
        """Test the script implementation replaces the host method."""
        ext = api.extend(extends=Entity, overrides={"tick": lambda this: "script"})
        assert isinstance(ext, Extender)
        bob = ext("bob")
        assert isinstance(bob, ExtendedInstanceProxy)
        assert bob.tick() == "script"

    def test_override_called_from_host(self, api, Entity) -> None:
        """Test host code calling the method reaches the override."""
        ext = api.extend({"extends": Entity, "overrides": {"tick": lambda this: "script"}})
        bob = ext.new("bob")
        assert bob.update() == "update:script"
        assert bob._self.r() == "update:script"

    def test_this_sees_host_members(self, api, Entity) -> None:
        """Test an override reads fields and calls methods through this."""
        ext = api.extend(extends=Entity, overrides={
            "describe": lambda this: f"{this.name} has {this.health()} hp"})
        assert ext("bob").describe() == "bob has 10 hp"

    def test_arguments_and_result_marshaled(self, api, Entity) -> None:
        """Test override arguments arrive as script values and the result
        is converted to the declared return type."""
        seen = []

        def damage(this, amount):
            seen.append(amount)
            return amount * 2.5

        bob = api.extend(extends=Entity, overrides={"damage": damage})("bob")
        assert bob.damage(2) == 5
        assert isinstance(bob._self.q(2), int)
        assert seen == [2, 2]

    def test_raw_class_and_lazy_holder_accepted(self, api) -> None:
        ext = api.extend(extends=D, overrides={"tick": lambda this: "raw"})
        assert ext().tick() == "raw"
        lazy = api.importSymbol("net.game.entity.Entity", lazy=True)
        assert api.extend(extends=lazy)().tick() == "entity"

    def test_unmapped_name_overrides_literal(self, api, Entity) -> None:
        """Test a key with no mapping names the runtime method itself."""
        bob = api.extend(extends=Entity, overrides={"t": lambda this: "literal"})("bob")
        assert bob.tick() == "literal"

    def test_configuration_errors(self, api, Entity) -> None:
        with pytest.raises(ArgErr):
            api.extend()
        with pytest.raises(ArgErr):
            api.extend(extends="net.game.entity.Entity")
        with pytest.raises(ArgErr):
            api.extend(extends=Entity, overrides={"tick": "not callable"})
        with pytest.raises(ArgErr):
            api.extend("not a config")

    def test_final_class_rejected(self, api) -> None:
        """Test a class that cannot be subclassed fails at definition."""
        with pytest.raises(ArgErr):
            api.extend(extends=bool)


class TestPrototype:
    """Test the generated host subclass."""

    def test_prototype(self, api, Entity) -> None:
        ext = api.extend(extends=Entity, overrides={"tick": lambda this: "script"})
        proto = ext.prototype()
        assert proto is ext["prototype"]
        assert issubclass(proto, D)
        assert proto.__module__ == GENERATED_MODULE
        assert unwrap(ext) is proto

    def test_unbound_subclass_runs_native(self, api, Entity) -> None:
        """Test a host subclass of the prototype keeps native behavior."""
        proto = api.extend(extends=Entity, overrides={"tick": lambda this: "script"}).prototype()
        sub = type("Sub", (proto,), {})
        assert sub("z").r() == "update:entity"

    def test_extender_is_read_only(self, api, Entity) -> None:
        ext = api.extend(extends=Entity)
        with pytest.raises(UnsupportedErr):
            ext.prototype = None
        with pytest.raises(MemberNotFoundErr):
            ext["other"]
        assert ext.kind is ProxyKind.EXTENDER


class TestInterfaces:
    """Test implementing interfaces and ambiguous overrides."""

    def test_ambiguous_override(self, api, Entity, Ticking) -> None:
        """Test a key naming different methods on two targets is rejected."""
        with pytest.raises(AmbiguousOverrideErr):
            api.extend(extends=Entity, implements=Ticking, overrides={"tick": lambda this: "x"})

    def test_explicit_target(self, api, Entity, Ticking) -> None:
        """Test the per-target form picks one target's method."""
        ext = api.extend(extends=Entity, implements=[Ticking], overrides={
            "tick": {"net.game.api.Ticking": lambda this: "ticking"}})
        bob = ext("bob")
        assert isinstance(bob._self, G)
        assert bob._self.w() == "ticking"
        assert bob.tick() == "entity"

    def test_explicit_target_by_short_name(self, api, Entity, Ticking) -> None:
        ext = api.extend(extends=Entity, implements=Ticking, overrides={
            "tick": {"G": lambda this: "ticking", "net.game.entity.Entity": lambda this: "entity!"}})
        bob = ext("bob")
        assert bob._self.w() == "ticking"
        assert bob.tick() == "entity!"

    def test_unknown_target_warns(self, api, Entity, records) -> None:
        """Test a target that is not extended is skipped with a warning."""
        ext = api.extend(extends=Entity, overrides={
            "tick": {"net.game.api.Named": lambda this: "never"}})
        assert ext("bob").tick() == "entity"
        assert any(r.logName() == "mapbridge.extend" and "net.game.api.Named" in r.msg()
                   for r in records)

    def test_abstract_method_left_unimplemented(self, api, Entity, Ticking) -> None:
        """Test construction fails while an interface method is abstract."""
        ext = api.extend(extends=Entity, implements=Ticking)
        with pytest.raises(ConstructionErr):
            ext("bob")

    def test_interface_only(self, api, Ticking) -> None:
        """Test extending an abstract class directly."""
        ticker = api.extend(extends=Ticking, overrides={"tick": lambda this: "only"})()
        assert ticker._self.w() == "only"
        assert ticker.tick() == "only"


class TestAddons:
    """Test script properties added to instances."""

    def test_addon_values_and_functions(self, api, Entity) -> None:
        ext = api.extend(extends=Entity, addons={
            "level": 3,
            "greet": lambda this, who: f"{this.name} greets {who}",
        })
        bob = ext("bob")
        assert bob.level == 3
        assert bob.greet("amy") == "bob greets amy"
        assert "level" in bob

    def test_properties_are_per_instance(self, api, Entity) -> None:
        ext = api.extend(extends=Entity, addons={"level": 3})
        bob, amy = ext("bob"), ext("amy")
        bob.level = 4
        bob.mood = "happy"
        assert (bob.level, amy.level) == (4, 3)
        assert bob.mood == "happy"
        assert "mood" not in amy

    def test_writes_reach_host_fields(self, api, Entity) -> None:
        bob = api.extend(extends=Entity)("bob")
        bob.name = "rob"
        assert bob._self.n == "rob"

    def test_reserved_names(self, api, Entity) -> None:
        bob = api.extend(extends=Entity)("bob")
        for key in ("_self", "_super", "instance"):
            assert key in bob
            with pytest.raises(UnsupportedErr):
                bob[key] = 1

    def test_overrides_see_addons(self, api, Entity) -> None:
        """Test this inside an override shares the instance's properties."""
        def tick(this):
            this.ticks = this.ticks + 1
            return f"tick {this.ticks}"

        bob = api.extend(extends=Entity, overrides={"tick": tick}, addons={"ticks": 0})("bob")
        assert bob.update() == "update:tick 1"
        assert bob.update() == "update:tick 2"
        assert bob.ticks == 2


class TestSuper:
    """Test _super chains across generations."""

    def test_super_reaches_native(self, api, Entity) -> None:
        bob = api.extend(extends=Entity, overrides={
            "tick": lambda this: "wrapped-" + this._super.tick()})("bob")
        assert bob.tick() == "wrapped-entity"

    def test_super_chain(self, api, Entity) -> None:
        """Test each generation's _super reaches the one before it."""
        one = api.extend(extends=Entity, overrides={"tick": lambda this: "one>" + this._super.tick()})
        two = api.extend(extends=one, overrides={"tick": lambda this: "two>" + this._super.tick()})
        three = api.extend(extends=two, overrides={"tick": lambda this: "three>" + this._super.tick()})
        assert three("bob").tick() == "three>two>one>entity"
        assert two("bob").tick() == "two>one>entity"
        assert three("bob").update() == "update:three>two>one>entity"
        assert three.generation().depth() == 3

    def test_super_skips_generation_without_override(self, api, Entity) -> None:
        one = api.extend(extends=Entity, overrides={"tick": lambda this: "one"})
        two = api.extend(extends=one, addons={"x": 1})
        three = api.extend(extends=two, overrides={"tick": lambda this: "three>" + this._super.tick()})
        bob = three("bob")
        assert bob.tick() == "three>one"
        assert bob.x == 1

    def test_super_for_method_not_overridden(self, api, Entity) -> None:
        bob = api.extend(extends=Entity, overrides={
            "tick": lambda this: this._super.describe()})("bob")
        assert bob.tick() == "entity bob"

    def test_super_missing_member(self, api, Entity) -> None:
        bob = api.extend(extends=Entity, overrides={"tick": lambda this: this._super.fly()})("bob")
        with pytest.raises(MemberNotFoundErr):
            bob.tick()

    def test_super_is_read_only(self, api, Entity) -> None:
        bob = api.extend(extends=Entity)("bob")
        with pytest.raises(UnsupportedErr):
            bob._super.tick = None
        assert bob._super.kind is ProxyKind.SUPER

    def test_extend_from_instance(self, api, Entity) -> None:
        """Test an extended instance can serve as the parent generation."""
        bob = api.extend(extends=Entity, overrides={"tick": lambda this: "one"})("bob")
        ext = api.extend(extends=bob, overrides={"tick": lambda this: "two>" + this._super.tick()})
        assert ext("amy").tick() == "two>one"


class TestPerInstance:
    """Test overrides and addons given at construction."""

    def test_instance_override(self, api, Entity) -> None:
        ext = api.extend(extends=Entity, overrides={"tick": lambda this: "class"})
        solo = ext.newInstance("bob", overrides={"tick": lambda this: "solo>" + this._super.tick()})
        assert solo.tick() == "solo>class"
        assert solo.update() == "update:solo>class"
        assert ext("amy").tick() == "class"

    def test_instance_override_of_new_name(self, api, Entity) -> None:
        """Test an instance may override a method the class did not."""
        ext = api.extend(extends=Entity, overrides={"tick": lambda this: "class"})
        solo = ext.newInstance("bob", overrides={"describe": lambda this: "solo"})
        assert solo.describe() == "solo"
        assert solo.tick() == "class"
        assert ext("amy").describe() == "entity amy"

    def test_instance_addons(self, api, Entity) -> None:
        ext = api.extend(extends=Entity, addons={"level": 1})
        bob = ext.new("bob", addons={"level": 9, "hat": "red"})
        assert (bob.level, bob.hat) == (9, "red")
        assert ext("amy").level == 1


class TestExtendedInstance:
    """Test the composite instance proxy."""

    def test_instance_member(self, api, Entity) -> None:
        """Test instance is a plain proxy of the host object."""
        bob = api.extend(extends=Entity, overrides={"tick": lambda this: "script"})("bob")
        assert bob.instance.kind is ProxyKind.OBJECT
        assert bob.instance._self is bob._self
        assert unwrap(bob) is bob._self

    def test_host_results_return_composite(self, api, Entity) -> None:
        """Test a host method returning the extended object yields the
        same composite proxy."""
        bob = api.extend(extends=Entity)("bob")
        assert bob.getSelf() is bob
        assert api.wrap(bob._self) is bob

    def test_member_keys(self, api, Entity) -> None:
        bob = api.extend(extends=Entity, addons={"level": 1})("bob")
        keys = bob.getMemberKeys()
        assert keys[:3] == ("_self", "_super", "instance")
        assert "level" in keys and "health" in keys

    def test_host_constructor_failure(self, api, Entity) -> None:
        """Test an exception in the host constructor is a ConstructionErr."""
        ext = api.extend(extends=Entity)
        with pytest.raises(ConstructionErr) as info:
            ext(5)
        assert isinstance(info.value.cause(), TypeError)
        assert ext("bob").name == "bob"
