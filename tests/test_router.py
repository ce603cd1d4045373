import pytest
from hypothesis import given
from hypothesis import strategies as st

from microws.router import HttpRouter


def recorder(calls, label, result=True):
    def handler(router):
        calls.append((label, router.parameters()))
        return result

    return handler


def test_static_route_matches():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/hi", recorder(calls, "hi"))
    assert router.route("GET", "/hi") is True
    assert calls == [("hi", ())]


def test_unmatched_route_returns_false():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/hi", recorder(calls, "hi"))
    assert router.route("GET", "/other") is False
    assert router.route("POST", "/hi") is False
    assert calls == []


def test_parameters_are_collected():
    router = HttpRouter()
    calls = []
    router.add(["get"], "/:hello/:hi", recorder(calls, "params"))
    assert router.route("get", "/first/second") is True
    assert calls == [("params", ("first", "second"))]


def test_empty_parameter_segment_does_not_match():
    router = HttpRouter()
    calls = []
    router.add(["get"], "/:hello/:hi", recorder(calls, "params"))
    assert router.route("get", "/first/") is False
    assert calls == []


def test_parameters_then_wildcard():
    router = HttpRouter()
    calls = []
    router.add(["post"], "/:hello/:hi/*", recorder(calls, "wild"))
    assert router.route("post", "/a/b/c/d") is True
    assert calls == [("wild", ("a", "b"))]


def test_wildcard_has_no_parameters():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/*", recorder(calls, "any"))
    assert router.route("GET", "/deep/nested/path") is True
    assert calls == [("any", ())]


@pytest.mark.parametrize("wildcard_first", [True, False])
def test_static_segment_tried_before_wildcard(wildcard_first):
    router = HttpRouter()
    calls = []
    routes = [("/*", recorder(calls, "wild", False)), ("/hi", recorder(calls, "hi"))]
    if not wildcard_first:
        routes.reverse()
    for pattern, handler in routes:
        router.add(["get"], pattern, handler)
    assert router.route("get", "/hi") is True
    assert [label for label, _ in calls] == ["hi"]


def test_yielding_handler_falls_through():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/:name", recorder(calls, "param", False))
    router.add(["GET"], "/*", recorder(calls, "wild"))
    assert router.route("GET", "/x") is True
    assert [label for label, _ in calls] == ["param", "wild"]
    assert calls[-1][1] == ()


def test_any_method_matches_every_method():
    router = HttpRouter()
    calls = []
    router.add([HttpRouter.ANY_METHOD_TOKEN], "/x", recorder(calls, "any"))
    assert router.route("POST", "/x") is True
    assert router.route("DELETE", "/x") is True
    assert len(calls) == 2


def test_method_miss_falls_back_to_any():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/a", recorder(calls, "get"))
    router.add(["*"], "/b", recorder(calls, "any"))
    assert router.route("GET", "/b") is True
    assert [label for label, _ in calls] == ["any"]


def test_medium_priority_before_low_on_same_node():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/x", recorder(calls, "low", False), HttpRouter.LOW_PRIORITY)
    router.add(["GET"], "/x", recorder(calls, "medium", False), HttpRouter.MEDIUM_PRIORITY)
    assert router.route("GET", "/x") is False
    assert [label for label, _ in calls] == ["medium", "low"]


def test_high_priority_route_runs_first():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/x", recorder(calls, "medium"))
    router.add(["GET"], "/x", recorder(calls, "high"), HttpRouter.HIGH_PRIORITY)
    assert router.route("GET", "/x") is True
    assert [label for label, _ in calls] == ["high"]


def test_add_replaces_equal_route():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/x", recorder(calls, "first"))
    router.add(["GET"], "/x", recorder(calls, "second"))
    assert router.route("GET", "/x") is True
    assert [label for label, _ in calls] == ["second"]


def test_add_requires_a_method():
    router = HttpRouter()
    with pytest.raises(ValueError):
        router.add([], "/x", lambda r: True)


def test_remove_route():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/x", recorder(calls, "x"))
    assert router.remove("GET", "/x", HttpRouter.MEDIUM_PRIORITY) is True
    assert router.route("GET", "/x") is False
    assert router.remove("GET", "/x", HttpRouter.MEDIUM_PRIORITY) is False
    assert calls == []


def test_remove_with_wrong_priority_does_nothing():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/x", recorder(calls, "x"))
    assert router.remove("GET", "/x", HttpRouter.LOW_PRIORITY) is False
    assert router.route("GET", "/x") is True


def test_remove_keeps_other_handlers_aligned():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/a", recorder(calls, "a"))
    router.add(["GET"], "/b", recorder(calls, "b"))
    router.add(["POST"], "/c", recorder(calls, "c"))
    assert router.remove("GET", "/a", HttpRouter.MEDIUM_PRIORITY) is True
    assert router.route("GET", "/b") is True
    assert router.route("POST", "/c") is True
    assert router.route("GET", "/a") is False
    assert [label for label, _ in calls] == ["b", "c"]


def test_remove_parameter_route_by_other_name():
    router = HttpRouter()
    router.add(["GET"], "/:first", lambda r: True)
    assert router.remove("GET", "/:second", HttpRouter.MEDIUM_PRIORITY) is True
    assert router.route("GET", "/value") is False


def test_remove_one_method_removes_all_methods_of_handler():
    router = HttpRouter()
    router.add(["GET", "POST"], "/m", lambda r: True)
    assert router.route("POST", "/m") is True
    assert router.remove("GET", "/m", HttpRouter.MEDIUM_PRIORITY) is True
    assert router.route("GET", "/m") is False
    assert router.route("POST", "/m") is False


def test_user_data_is_visible_to_handlers():
    router = HttpRouter()
    seen = []
    router.add(["GET"], "/u", lambda r: seen.append(r.user_data) or True)
    router.user_data = {"request": 7}
    assert router.route("GET", "/u") is True
    assert seen == [{"request": 7}]


def test_root_url_route():
    router = HttpRouter()
    router.add(["GET"], "/", lambda r: True)
    assert router.route("GET", "/") is True
    assert router.route("GET", "/x") is False


def test_segments_beyond_limit_are_ignored():
    router = HttpRouter()
    router.add(["GET"], "/a" * 100, lambda r: True)
    assert router.route("GET", "/a" * 100) is True
    assert router.route("GET", "/a" * 101) is True
    assert router.route("GET", "/a" * 99) is False


def test_parameters_reset_between_routes():
    router = HttpRouter()
    calls = []
    router.add(["GET"], "/p/:id", recorder(calls, "p"))
    router.add(["GET"], "/*", recorder(calls, "w"))
    assert router.route("GET", "/p/1") is True
    assert router.route("GET", "/q") is True
    assert calls == [("p", ("1",)), ("w", ())]


segment = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-_.", min_size=1, max_size=8)


@given(st.lists(segment, min_size=1, max_size=6))
def test_added_static_route_is_found(segments):
    router = HttpRouter()
    url = "/" + "/".join(segments)
    calls = []
    router.add(["GET"], url, recorder(calls, "s"))
    assert router.route("GET", url) is True
    assert calls == [("s", ())]


@given(st.lists(segment, min_size=1, max_size=6))
def test_parameter_route_captures_every_segment(segments):
    router = HttpRouter()
    pattern = "".join(f"/:p{i}" for i in range(len(segments)))
    calls = []
    router.add(["GET"], pattern, recorder(calls, "p"))
    assert router.route("GET", "/" + "/".join(segments)) is True
    assert calls == [("p", tuple(segments))]


@given(st.lists(segment, min_size=1, max_size=4, unique=True))
def test_add_then_remove_restores_no_match(segments):
    router = HttpRouter()
    for seg in segments:
        router.add(["GET"], "/" + seg, lambda r: True)
    for seg in segments:
        assert router.remove("GET", "/" + seg, HttpRouter.MEDIUM_PRIORITY) is True
    assert all(router.route("GET", "/" + seg) is False for seg in segments)