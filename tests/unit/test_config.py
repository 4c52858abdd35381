"""Tests for typed module configuration."""

import pytest

from moduscope.core.exceptions import InvalidArgumentError
from moduscope.services.config import ModuleConfig, RouteDefinition, ServiceConfig


class HomeController:
    pass


def _route(route: str = "/home", **overrides):
    entry = {
        "type": "Literal",
        "options": {
            "route": route,
            "defaults": {"controller": HomeController, "action": "index"},
        },
        "may_terminate": True,
        "child_routes": {},
    }
    entry.update(overrides)
    return entry


@pytest.mark.core
class TestRouteDefinition:
    """Tests for route validation."""

    def test_literal_route(self) -> None:
        route = RouteDefinition.from_mapping("home", _route())
        assert route.type == "literal"
        assert route.route == "/home"
        assert route.controller is HomeController
        assert route.action == "index"

    def test_action_defaults_to_index(self) -> None:
        entry = _route()
        entry["options"]["defaults"] = {"controller": HomeController}
        assert RouteDefinition.from_mapping("home", entry).action == "index"

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="unsupported type 'Regex'"):
            RouteDefinition.from_mapping("home", _route(type="Regex"))

    @pytest.mark.parametrize("path", ["", "home", None, 42])
    def test_path_must_be_absolute(self, path) -> None:
        with pytest.raises(InvalidArgumentError, match="starting with '/'"):
            RouteDefinition.from_mapping("home", _route(route=path))

    def test_terminating_route_needs_controller(self) -> None:
        entry = _route()
        entry["options"]["defaults"] = {}
        with pytest.raises(InvalidArgumentError, match="names no controller"):
            RouteDefinition.from_mapping("home", entry)

    def test_walk_flattens_children(self) -> None:
        parent = _route(
            "/users",
            may_terminate=True,
            child_routes={
                "detail": {
                    "type": "segment",
                    "options": {
                        "route": "/{user_id}",
                        "defaults": {"controller": HomeController, "action": "view"},
                    },
                },
            },
        )
        route = RouteDefinition.from_mapping("users", parent)

        flattened = [(name, path) for name, path, _ in route.walk()]

        assert flattened == [("users", "/users"), ("users/detail", "/users/{user_id}")]

    def test_non_terminating_parent_is_skipped(self) -> None:
        parent = _route("/admin", may_terminate=False)
        parent["options"]["defaults"] = {}
        parent["child_routes"] = {"home": _route("/home")}

        route = RouteDefinition.from_mapping("admin", parent)

        assert [name for name, _, _ in route.walk()] == ["admin/home"]


@pytest.mark.core
class TestServiceConfig:
    """Tests for service table validation."""

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="unknown keys: delegators"):
            ServiceConfig.from_mapping({"delegators": {}}, "service_manager")

    def test_non_callable_factory_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="not callable"):
            ServiceConfig.from_mapping({"factories": {"x": "Factory"}}, "controllers")

    def test_invokable_must_be_class(self) -> None:
        with pytest.raises(InvalidArgumentError, match="not a class"):
            ServiceConfig.from_mapping({"invokables": {"x": object()}}, "filters")

    def test_section_must_be_mapping(self) -> None:
        with pytest.raises(InvalidArgumentError, match="must be a mapping"):
            ServiceConfig.from_mapping(["factories"], "service_manager")  # type: ignore[arg-type]


@pytest.mark.core
class TestModuleConfig:
    """Tests for the merged module configuration."""

    def test_empty_mapping(self) -> None:
        config = ModuleConfig.from_mapping({})
        assert config.routes == ()
        assert dict(config.controllers.factories) == {}

    def test_full_mapping(self) -> None:
        config = ModuleConfig.from_mapping(
            {
                "controllers": {"invokables": {HomeController: HomeController}},
                "router": {"routes": {"home": _route()}},
                "view_manager": {"template_path_stack": {"home": "/views"}},
                "log": {"type": "memory"},
            }
        )

        assert [route.name for route in config.routes] == ["home"]
        assert config.view_manager.template_path_stack == {"home": "/views"}
        assert config.extra["log"] == {"type": "memory"}

    def test_invalid_route_fails_at_load(self) -> None:
        with pytest.raises(InvalidArgumentError):
            ModuleConfig.from_mapping({"router": {"routes": {"x": _route(type="hostname")}}})
