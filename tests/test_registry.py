"""
Tests for the instance registry.
"""

from player_api import PlayerHandle, get_player, get_players
from player_api.registry import InstanceRegistry


class TestUniqueIds:

    def test_ids_follow_construction_order(self, factory, registry):
        handles = [PlayerHandle(f"p{i}", controller_factory=factory, registry=registry) for i in range(4)]

        assert [h.unique_id for h in handles] == [0, 1, 2, 3]

    def test_ids_not_reused_after_remove(self, factory, registry):
        a = PlayerHandle("a", controller_factory=factory, registry=registry)
        a.remove()
        b = PlayerHandle("b", controller_factory=factory, registry=registry)

        assert a.unique_id == 0
        assert b.unique_id == 1


class TestRegistration:

    def test_handles_register_at_construction(self, factory, registry):
        a = PlayerHandle("a", controller_factory=factory, registry=registry)
        b = PlayerHandle("b", controller_factory=factory, registry=registry)

        assert registry.list() == [a, b]
        assert len(registry) == 2
        assert a in registry

    def test_remove_leaves_only_other_handle(self, factory, registry):
        a = PlayerHandle("a", controller_factory=factory, registry=registry)
        b = PlayerHandle("b", controller_factory=factory, registry=registry)

        a.remove()

        assert registry.list() == [b]
        assert a not in registry

    def test_unregister_absent_handle_is_noop(self, factory, registry):
        a = PlayerHandle("a", controller_factory=factory, registry=registry)
        other = InstanceRegistry()

        assert other.unregister(a) is False
        assert registry.unregister(a) is True
        assert registry.unregister(a) is False

    def test_unregister_removes_one_entry_from_the_end(self, factory, registry):
        a = PlayerHandle("a", controller_factory=factory, registry=registry)
        b = PlayerHandle("b", controller_factory=factory, registry=registry)
        registry.register(a)  # duplicate entry

        registry.unregister(a)

        assert registry.list() == [a, b]

    def test_list_is_a_snapshot(self, factory, registry):
        PlayerHandle("a", controller_factory=factory, registry=registry)
        snapshot = registry.list()
        snapshot.clear()

        assert len(registry) == 1


class TestLookup:

    def test_get_by_index_id_and_default(self, factory, registry):
        a = PlayerHandle("a", controller_factory=factory, registry=registry)
        b = PlayerHandle("b", controller_factory=factory, registry=registry)

        assert registry.get() is a
        assert registry.get(1) is b
        assert registry.get("b") is b
        assert registry.get(5) is None
        assert registry.get("missing") is None

    def test_empty_registry(self, registry):
        assert registry.get() is None
        assert registry.list() == []

    def test_module_level_helpers_use_global_registry(self, factory):
        a = PlayerHandle("global-a", controller_factory=factory)

        assert get_players() == [a]
        assert get_player("global-a") is a
        assert a.unique_id == 0

        a.remove()
        assert get_players() == []

    def test_reset_restarts_counter(self, factory, registry):
        PlayerHandle("a", controller_factory=factory, registry=registry)
        registry.reset()

        assert registry.list() == []
        assert registry.next_unique_id() == 0
