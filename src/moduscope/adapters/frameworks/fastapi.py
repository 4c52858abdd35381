"""FastAPI adapter exposing the module route table."""

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from moduscope.adapters.frameworks.asgi import STATE_EVENTS_ENABLED, STATE_REQUEST_ID
from moduscope.core.events.channels import EventChannels
from moduscope.core.exceptions import ActionNotFoundError
from moduscope.core.ports import ServiceLocatorPort
from moduscope.services.config import ModuleConfig, RouteDefinition

DISPATCH_EVENT = "dispatch"


def _make_endpoint(
    route: RouteDefinition,
    controllers: ServiceLocatorPort,
    channels: EventChannels | None,
) -> Callable[[Request], Coroutine[Any, Any, Any]]:
    async def endpoint(request: Request) -> Any:
        controller = controllers.get(route.controller)
        params = dict(request.path_params)
        state = request.scope.get("state") or {}
        if channels is not None and state.get(STATE_EVENTS_ENABLED, True):
            channels.trigger(
                DISPATCH_EVENT,
                target=controller,
                params={
                    "action": route.action,
                    "route": route.name,
                    "request_id": state.get(STATE_REQUEST_ID),
                    **params,
                },
            )
        try:
            return controller.dispatch(route.action, **params)
        except ActionNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    return endpoint


def create_module_router(
    config: ModuleConfig,
    controllers: ServiceLocatorPort,
    channels: EventChannels | None = None,
) -> APIRouter:
    """Create a FastAPI router from the merged module route table.

    Every terminating route becomes a GET endpoint named after its full
    route name (children joined with "/"). The endpoint resolves the
    route's controller from ``controllers``, triggers ``dispatch`` on
    ``channels`` and returns the action's result. Requests the lifecycle
    middleware excluded fire no ``dispatch``; the others tag it with the
    request id the middleware assigned.

    Args:
        config: Merged module configuration.
        controllers: Container holding the controllers.
        channels: Event channels for the dispatch event (optional).

    Returns:
        APIRouter with one endpoint per terminating route.
    """
    router = APIRouter()
    for top_level in config.routes:
        for full_name, path, route in top_level.walk():
            router.add_api_route(
                path,
                _make_endpoint(route, controllers, channels),
                methods=["GET"],
                name=full_name,
            )
    return router
