from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, MutableMapping, Optional, Union

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import Response
from starlette.websockets import WebSocket
from strawberry.asgi import GraphQL

from adapters.entry.graphql.context import SCOPE_STATE_KEY, RequestContext
from adapters.entry.graphql.schema import schema
from adapters.entry.http.dtos.error_dtos import (
    internal_error_response,
    unauthorized_response,
    unavailable_response,
)
from adapters.entry.http.response_proxy import ASGIResponseSink, BufferedResponse, BufferedSend
from core.domain.errors import AuthRejected, StoreUnavailable
from core.repositories.store_connection import StoreConnector
from core.repositories.university_data_source import UniversityDataSource
from core.usecases.authenticate_api_key_use_case import AuthenticateApiKeyUseCase

Scope = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send = Callable[[MutableMapping[str, Any]], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]


class CatalogGraphQL(GraphQL):
    """
    Strawberry ASGI app that exposes the pipeline's RequestContext to resolvers.
    """

    async def get_context(
        self,
        request: Union[Request, WebSocket],
        response: Union[Response, WebSocket],
    ) -> dict:
        return {
            "request": request,
            "response": response,
            SCOPE_STATE_KEY: request.scope["state"][SCOPE_STATE_KEY],
        }


def build_graphql_app(*, graphiql: bool = True) -> CatalogGraphQL:
    return CatalogGraphQL(schema, graphql_ide="graphiql" if graphiql else None)


class GatewayApp:
    """
    ASGI pipeline for the versioned GraphQL endpoint.

    Per request, strictly in this order:
      1. acquire a store connection (StoreUnavailable -> 503)
      2. authenticate the API key (AuthRejected -> 401, StoreUnavailable -> 503)
      3. run GraphQL with its response captured in a BufferedResponse
      4. release the store connection
      5. replay the buffered response onto the client connection

    Steps 1-4 run inside one `async with`, so the connection is released on every
    path before anything is sent to the client.
    """

    def __init__(
        self,
        *,
        graphql_app: Optional[ASGIApp] = None,
        connector: Optional[StoreConnector] = None,
        data_source: Optional[UniversityDataSource] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._graphql = graphql_app or build_graphql_app()
        self._connector = connector
        self._data_source = data_source
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def bind(self, *, connector: StoreConnector, data_source: UniversityDataSource) -> None:
        """
        Attach the store and upstream once they exist (application startup).
        """
        self._connector = connector
        self._data_source = data_source

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            await send({"type": "websocket.close", "code": 1008})
            return
        if scope["type"] != "http":
            return
        if self._connector is None or self._data_source is None:
            raise RuntimeError("GatewayApp is not bound to a store and data source")

        authorization = Headers(scope=scope).get("authorization")
        buffered = BufferedResponse()

        try:
            async with self._connector.connect() as connection:
                ctx = RequestContext(connection=connection, data_source=self._data_source)
                await self._authenticate(ctx, authorization)
                await self._execute(ctx, scope, receive, buffered)
        except AuthRejected:
            response = unauthorized_response()
        except StoreUnavailable as exc:
            self._logger.error("Store unavailable: %s", exc)
            response = unavailable_response()
        except Exception:
            self._logger.exception("GraphQL execution failed")
            response = internal_error_response()
        else:
            if buffered.ended:
                await buffered.replay(ASGIResponseSink(send))
                return
            self._logger.error("GraphQL execution finished without a complete response")
            response = internal_error_response()

        await response(scope, receive, send)

    async def _authenticate(self, ctx: RequestContext, authorization: Optional[str]) -> None:
        uc = AuthenticateApiKeyUseCase(api_key_repo=ctx.connection.api_keys)
        try:
            await uc.execute(authorization)
        except (AuthRejected, StoreUnavailable) as exc:
            ctx.reject()
            self._logger.info("Request rejected: %s", exc)
            raise
        ctx.authorize()

    async def _execute(self, ctx: RequestContext, scope: Scope, receive: Receive, buffered: BufferedResponse) -> None:
        child_scope = dict(scope)
        child_scope["state"] = {**(scope.get("state") or {}), SCOPE_STATE_KEY: ctx}
        await self._graphql(child_scope, receive, BufferedSend(buffered))
