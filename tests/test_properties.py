"""
Property-based tests for handle identity and event payloads.

Invariants tested:
    1. unique ids are 0..N-1 in construction order, never reused
    2. removed handles leave the registry; the rest stay in order
    3. trigger delivers a typed shallow copy and leaves the caller's dict alone
    4. setup sequences always leave exactly one live controller
"""

from hypothesis import HealthCheck, given, settings, strategies as st

from player_api import PlayerHandle
from player_api.events import DispatchPolicy
from player_api.registry import InstanceRegistry
from player_api.testing import MockControllerFactory


payload_strategy = st.dictionaries(
    keys=st.text(min_size=1, max_size=10).filter(lambda k: k != "type"),
    values=st.one_of(st.integers(), st.text(max_size=10), st.booleans(), st.none()),
    max_size=8,
)

event_name_strategy = st.sampled_from(["time", "play", "seek", "meta", "adTime", "custom"])

quiet = settings(
    max_examples=50,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


def _handles(registry, count):
    factory = MockControllerFactory()
    return [
        PlayerHandle(
            f"p{i}",
            controller_factory=factory,
            registry=registry,
            error_reporter=lambda *a: None,
        )
        for i in range(count)
    ]


class TestIdentityProperties:

    @given(count=st.integers(min_value=1, max_value=12), data=st.data())
    @quiet
    def test_unique_ids_and_removal(self, count, data):
        registry = InstanceRegistry()
        handles = _handles(registry, count)

        assert [h.unique_id for h in handles] == list(range(count))

        removed = data.draw(st.sets(st.integers(min_value=0, max_value=count - 1)))
        for index in sorted(removed):
            handles[index].remove()

        live = [h.unique_id for h in registry.list()]
        assert live == [i for i in range(count) if i not in removed]

        newcomer = _handles(registry, 1)[0]
        assert newcomer.unique_id == count


class TestPayloadProperties:

    @given(name=event_name_strategy, payload=payload_strategy)
    @quiet
    def test_trigger_normalizes_payload(self, name, payload):
        handle = PlayerHandle(
            "p",
            controller_factory=MockControllerFactory(),
            registry=InstanceRegistry(),
            dispatch_policy=DispatchPolicy.UNSAFE,
        )
        before = dict(payload)
        received = []
        handle.on(name, received.append)

        handle.trigger(name, payload)

        assert received == [{**before, "type": name}]
        assert payload == before


class TestSetupProperties:

    @given(setups=st.integers(min_value=0, max_value=6))
    @quiet
    def test_one_live_controller(self, setups):
        factory = MockControllerFactory()
        handle = PlayerHandle("p", controller_factory=factory, registry=InstanceRegistry())

        for _ in range(setups):
            handle.setup({})
            assert len(factory.live()) == 1

        assert len(factory.created) == setups + 1
        assert all(c.destroy_count == 1 for c in factory.created[:-1])
