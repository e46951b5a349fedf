"""
Tests for Sandbox routing and lifecycle
"""

import math
from unittest.mock import MagicMock, patch

import pytest

from couchook.composite import Component
from couchook.errors import InvalidRunnerError, RouteResolutionError
from couchook.runner import EventRouteCache, Module, Nature, Runner, Sandbox

LOADER_ROUTES = {"loader": {"onReady": ["consumer.on_loader_ready"]}}


def make_consumer(calls):
    def on_loader_ready(self, payload, meta):
        calls.append((self.identity, payload, meta.type))

    return Module("consumer").setup(None, {"traits": [{"on_loader_ready": on_loader_ready}]})


@pytest.fixture
def calls():
    return []


@pytest.fixture
def wired(sandbox, calls):
    """Initiated sandbox routing loader.onReady to consumer.on_loader_ready."""
    loader = Module("loader")
    consumer = make_consumer(calls)
    sandbox.setup(None, {"events": LOADER_ROUTES})
    sandbox.add_child(loader).add_child(consumer)
    sandbox.init()
    return sandbox, loader, consumer


# ==================== Lifecycle ====================


class TestLifecycle:
    def test_is_root_container_runner(self, sandbox):
        assert isinstance(sandbox, Runner)
        assert sandbox.is_container()
        assert sandbox.is_root()

    def test_init(self, sandbox, controller):
        details = {"debug": True}
        sandbox.setup(controller, {"states": {"ready": []}}).init(details)
        assert sandbox.initiated
        assert isinstance(sandbox.cache, EventRouteCache)
        assert sandbox.nature.identity == "sandbox"
        assert sandbox.nature.controller is controller
        assert sandbox.attitude.has_state("ready")
        assert controller.attitude is sandbox.attitude
        assert controller.details is details

    def test_init_initiates_children(self, sandbox, controller_factory):
        child_controller = controller_factory()
        child = Module("child").setup(child_controller)
        sandbox.add_child(child)
        sandbox.init({"x": 1})
        assert child.initiated
        assert child_controller.details == {"x": 1}

    def test_init_exposes_child_natures(self, wired):
        sandbox, loader, consumer = wired
        assert sandbox.nature.loader is loader.nature
        assert sandbox.nature.consumer is consumer.nature

    def test_routing_listener_runs_last(self, wired):
        _, loader, _ = wired
        records = loader.nature._listeners["*"]
        assert records[-1].priority == math.inf

    def test_init_twice_is_noop(self, wired):
        sandbox, loader, _ = wired
        sandbox.init()
        assert len(loader.nature._listeners["*"]) == 1

    def test_reset(self, wired):
        sandbox, loader, consumer = wired
        assert sandbox.reset() is sandbox
        assert not sandbox.initiated
        assert not loader.initiated
        assert not consumer.initiated
        assert not loader.nature.has_listener("*")
        assert "loader" not in sandbox.nature.member_names

    def test_reset_when_not_initiated(self, sandbox):
        assert sandbox.reset() is sandbox
        assert sandbox.cache is None

    def test_reset_removes_traits(self, sandbox):
        sandbox.setup(None, {"traits": [{"ping": lambda self: "pong"}]}).init()
        assert sandbox.nature.ping() == "pong"
        sandbox.reset()
        assert not sandbox.nature.has_trait("ping")

    def test_reinit_routes_again(self, wired, calls):
        sandbox, loader, _ = wired
        sandbox.reset().init()
        loader.nature.dispatch("onReady")
        assert calls == [("consumer", {}, "onReady")]

    def test_dispose(self, wired):
        sandbox, loader, consumer = wired
        assert sandbox.dispose() is sandbox
        assert sandbox.nature is None
        assert sandbox.attitude is None
        assert sandbox.cache is None
        assert sandbox.num_children() == 0
        assert loader.nature is None
        assert consumer.get_parent() is None


# ==================== Children ====================


class TestChildren:
    def test_add_child_returns_sandbox(self, sandbox, module):
        assert sandbox.add_child(module) is sandbox
        assert module.get_parent() is sandbox
        assert not module.initiated

    def test_add_non_runner_raises(self, sandbox):
        with pytest.raises(InvalidRunnerError):
            sandbox.add_child(Component("plain"))

    def test_add_none_is_ignored(self, sandbox):
        assert sandbox.add_child(None) is sandbox
        assert sandbox.num_children() == 0

    def test_add_child_after_init(self, sandbox, module):
        sandbox.init()
        sandbox.add_child(module)
        assert module.initiated
        assert sandbox.nature.module is module.nature
        assert module.nature.has_listener("*")

    def test_add_child_at_index(self, sandbox):
        a, b = Module("a"), Module("b")
        sandbox.add_child(a).add_child(b, 0)
        assert [child.id for child in sandbox.children] == ["b", "a"]

    def test_remove_child_by_id(self, wired):
        sandbox, loader, _ = wired
        assert sandbox.remove_child("loader") is loader
        assert not loader.initiated
        assert loader.get_parent() is None
        assert "loader" not in sandbox.nature.member_names

    def test_remove_child_by_index_and_instance(self, wired):
        sandbox, loader, consumer = wired
        assert sandbox.remove_child(0) is loader
        assert sandbox.remove_child(consumer) is consumer
        assert sandbox.num_children() == 0

    def test_remove_missing(self, wired):
        sandbox = wired[0]
        assert sandbox.remove_child("missing") is None
        assert sandbox.remove_child(5) is None
        assert sandbox.remove_child("sandbox") is None
        assert sandbox.num_children() == 2

    def test_removed_child_stops_routing(self, wired, calls, listener):
        sandbox, loader, _ = wired
        loader.nature.on("onReady", listener)
        sandbox.remove_child(loader)
        assert loader.nature.dispatch("onReady") is True
        listener.assert_called_once()
        assert calls == []

    def test_removed_after_cached_route(self, wired, calls):
        sandbox, loader, _ = wired
        loader.nature.dispatch("onReady")
        sandbox.remove_child("loader")
        loader.nature.dispatch("onReady")
        assert len(calls) == 1

    def test_remove_deep(self, sandbox):
        inner = Sandbox("inner")
        leaf = Module("leaf")
        inner.add_child(leaf)
        sandbox.add_child(inner).init()
        assert sandbox.remove_child("leaf", deep=True) is leaf
        assert inner.num_children() == 0
        assert not leaf.initiated
        assert "leaf" not in inner.nature.member_names


# ==================== Routing ====================


class TestRouting:
    def test_route_to_sibling(self, wired, calls, listener):
        sandbox, loader, _ = wired
        sandbox.nature.on("onReady", listener)
        assert loader.nature.dispatch("onReady", {"items": 3}) is True
        assert calls == [("consumer", {"items": 3}, "onReady")]
        listener.assert_called_once()
        payload, meta = listener.call_args.args
        assert payload == {"items": 3}
        assert meta.target is sandbox.nature

    def test_destination_receives_original_meta(self, sandbox):
        seen = []
        receiver = Module("receiver").setup(
            None, {"traits": [{"receive": lambda self, payload, meta: seen.append(meta)}]}
        )
        sender = Module("sender")
        sandbox.setup(None, {"events": {"sender": {"ping": ["receiver.receive"]}}})
        sandbox.add_child(sender).add_child(receiver).init()
        sender.nature.dispatch("ping")
        assert seen[0].target is sender.nature
        assert seen[0].type == "ping"

    def test_unmapped_event_still_bubbles(self, wired, calls, listener):
        sandbox, loader, _ = wired
        sandbox.nature.on("other", listener)
        loader.nature.dispatch("other")
        assert calls == []
        listener.assert_called_once()
        assert len(sandbox.cache) == 0

    def test_declaration_order(self, sandbox):
        order = []
        first = Module("first").setup(None, {"traits": [{"run": lambda self, p, m: order.append("first.run")}]})
        second = Module("second").setup(
            None,
            {
                "traits": [
                    {"run": lambda self, p, m: order.append("second.run")},
                    {"end": lambda self, p, m: order.append("second.end")},
                ]
            },
        )
        source = Module("source")
        sandbox.setup(None, {"events": {"source": {"go": ["second.run", "first.run", "second.end"]}}})
        sandbox.add_child(first).add_child(second).add_child(source).init()
        source.nature.dispatch("go")
        assert order == ["second.run", "first.run", "second.end"]

    def test_own_trait_path(self, sandbox, module):
        seen = []
        sandbox.setup(
            None,
            {
                "traits": [{"on_ready": lambda self, payload, meta: seen.append(self.identity)}],
                "events": {"module": {"ready": ["on_ready"]}},
            },
        )
        sandbox.add_child(module).init()
        module.nature.dispatch("ready")
        assert seen == ["sandbox"]
        assert sandbox.cache.get(("module", "ready"))[0].nature is sandbox.nature

    def test_own_attitude_routes_under_nature(self, sandbox, calls, listener):
        consumer = make_consumer(calls)
        sandbox.setup(
            None,
            {
                "states": {"ready": []},
                "events": {"nature": {"ready": ["consumer.on_loader_ready"]}},
            },
        )
        sandbox.add_child(consumer).init()
        sandbox.nature.on("ready", listener)
        assert sandbox.attitude.current_state.ready() is True
        assert calls == [("consumer", sandbox.attitude.current_state, "ready")]
        listener.assert_called_once()
        assert ("nature", "ready") in sandbox.cache

    def test_child_attitude_is_routed(self, sandbox, calls):
        loader = Module("loader").setup(None, {"states": {"onReady": []}})
        sandbox.setup(None, {"events": LOADER_ROUTES})
        sandbox.add_child(loader).add_child(make_consumer(calls)).init()
        loader.attitude.current_state.onReady()
        assert calls == [("consumer", loader.attitude.current_state, "onReady")]

    @pytest.mark.parametrize("child_id", ["controller", "identity", "on", "dispatch"])
    def test_child_named_like_bus_attribute(self, sandbox, calls, child_id):
        target = Module(child_id).setup(
            None, {"traits": [{"ready": lambda self, payload, meta: calls.append(self.identity)}]}
        )
        loader = Module("loader")
        sandbox.setup(None, {"events": {"loader": {"go": [f"{child_id}.ready"]}}})
        sandbox.add_child(loader).add_child(target).init()
        loader.nature.dispatch("go")
        assert calls == [child_id]

    def test_trait_named_like_bus_attribute(self, sandbox, calls):
        target = Module("target").setup(
            None, {"traits": [{"on": lambda self, payload, meta: calls.append(meta.type)}]}
        )
        loader = Module("loader")
        sandbox.setup(None, {"events": {"loader": {"go": ["target.on"]}}})
        sandbox.add_child(loader).add_child(target).init()
        loader.nature.dispatch("go")
        assert calls == ["go"]

    def test_unknown_path_raises(self, sandbox, module):
        sandbox.setup(None, {"events": {"module": {"ready": ["missing.fn"]}}})
        sandbox.add_child(module).init()
        with pytest.raises(RouteResolutionError) as exc:
            module.nature.dispatch("ready")
        assert exc.value.segment == "missing"

    def test_non_callable_target_raises(self, sandbox, module):
        sandbox.setup(None, {"events": {"module": {"ready": ["module.nothing"]}}})
        sandbox.add_child(module).init()
        with pytest.raises(RouteResolutionError) as exc:
            module.nature.dispatch("ready")
        assert exc.value.path == "module.nothing"


# ==================== Route cache ====================


class TestRouteCache:
    def test_populated_on_first_dispatch(self, wired):
        sandbox, loader, _ = wired
        assert len(sandbox.cache) == 0
        loader.nature.dispatch("onReady")
        assert sandbox.cache.keys() == [("loader", "onReady")]
        (target,) = sandbox.cache.get(("loader", "onReady"))
        assert isinstance(target.nature, Nature)
        assert target.nature.identity == "consumer"

    def test_second_dispatch_uses_cache(self, wired, calls):
        sandbox, loader, _ = wired
        with patch.object(sandbox, "_update_cache", wraps=sandbox._update_cache) as spy:
            loader.nature.dispatch("onReady")
            loader.nature.dispatch("onReady")
        spy.assert_called_once()
        assert len(calls) == 2

    def test_reset_clears_cache(self, wired):
        sandbox, loader, _ = wired
        loader.nature.dispatch("onReady")
        sandbox.reset()
        assert len(sandbox.cache) == 0

    def test_resolution_after_reset(self, wired, calls):
        sandbox, loader, _ = wired
        with patch.object(sandbox, "_update_cache", wraps=sandbox._update_cache) as spy:
            loader.nature.dispatch("onReady")
            sandbox.reset().init()
            loader.nature.dispatch("onReady")
        assert spy.call_count == 2
        assert len(calls) == 2

    def test_miss_is_not_cached(self, wired):
        sandbox, loader, _ = wired
        spy = MagicMock(wraps=sandbox._update_cache)
        with patch.object(sandbox, "_update_cache", spy):
            loader.nature.dispatch("unmapped")
        spy.assert_not_called()
        assert ("loader", "unmapped") not in sandbox.cache


# ==================== Nesting ====================


class TestNesting:
    def test_events_bubble_to_ancestors(self, calls):
        outer = Sandbox("main")
        inner = Sandbox("inner")
        leaf = Module("leaf")
        receiver = Module("receiver").setup(
            None,
            {"traits": [{"on_ping": lambda self, payload, meta: calls.append((meta.target.identity, payload))}]},
        )
        inner.add_child(leaf)
        outer.setup(None, {"events": {"inner": {"ping": ["receiver.on_ping"]}}})
        outer.add_child(inner).add_child(receiver).init()

        leaf.nature.dispatch("ping", {"n": 1})
        assert calls == [("inner", {"n": 1})]

    def test_nested_path(self, calls):
        outer = Sandbox("main")
        inner = Sandbox("inner")
        leaf = Module("leaf").setup(
            None, {"traits": [{"on_go": lambda self, payload, meta: calls.append(self.identity)}]}
        )
        source = Module("source")
        inner.add_child(leaf)
        outer.setup(None, {"events": {"source": {"go": ["inner.leaf.on_go"]}}})
        outer.add_child(inner).add_child(source).init()

        source.nature.dispatch("go")
        assert calls == ["leaf"]

    def test_nested_sandbox_initiated(self):
        outer = Sandbox("main")
        inner = Sandbox("inner")
        leaf = Module("leaf")
        inner.add_child(leaf)
        outer.add_child(inner).init()
        assert inner.initiated
        assert leaf.initiated
        assert outer.nature.inner.leaf is leaf.nature
