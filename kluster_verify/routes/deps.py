"""Request-scoped helpers shared by the route modules."""

from fastapi import Request

from ..dispatch import ToolDispatcher, build_dispatcher

API_KEY_HEADER = "x-api-key"


def dispatcher_for(request: Request) -> ToolDispatcher:
    """The app's dispatcher, or a fresh one when the caller sends its own x-api-key."""
    state = request.app.state
    header_key = request.headers.get(API_KEY_HEADER, "").strip()
    if not header_key:
        return state.dispatcher
    return build_dispatcher(
        state.settings,
        api_key=header_key,
        transport=state.transport,
        catalog=state.catalog,
    )
