"""
HTTP Message Processor

Redrives a message to the configured HTTP endpoint. The request method,
credentials and timeout come from the queue's ConfigurationEntry; message
attributes travel as request headers.
"""

import json
from typing import Optional

import httpx
from loguru import logger

from redrive.errors import HttpStatusError, MalformedMessageError
from redrive.models.configuration import ConfigurationEntry
from redrive.processors.base import MessageProcessor


class HttpMessageProcessor(MessageProcessor):
    """
    Sends each message as one HTTP request and waits for the response.

    GET requests carry the message's JSON properties as query parameters;
    DELETE, PUT and POST send the raw content as a JSON body. Only 200 and
    201 count as success.

    Usage:
        processor = HttpMessageProcessor()
        await processor.process_message('{"id": 1}', {"trace-id": "abc"}, entry)
    """

    ACCEPTED_STATUS_CODES = frozenset({200, 201})

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize HTTP processor.

        Args:
            transport: httpx transport override (tests use httpx.MockTransport)
        """
        self._transport = transport

    async def process_message(
        self,
        content: str,
        attributes: dict[str, str],
        configuration: ConfigurationEntry,
    ) -> None:
        logger.trace(f"Preparing request to {configuration.redrive_url}")
        url = httpx.URL(configuration.redrive_url)

        async with self.create_client(url, configuration) as client:
            request = self.build_request(client, content, attributes, configuration)
            await self._send_request(client, request, configuration)

    def create_client(self, url: httpx.URL, configuration: ConfigurationEntry) -> httpx.AsyncClient:
        """Client bound to the endpoint's origin, with TLS, timeout and Basic auth applied.

        Redirects are followed, so only the final response decides the outcome.
        """
        options = {
            "base_url": httpx.URL(scheme=url.scheme, host=url.host, port=url.port),
            "verify": not configuration.ignore_certificate_errors,
            "follow_redirects": True,
        }

        if configuration.timeout is not None:
            options["timeout"] = configuration.timeout_seconds

        if configuration.basic_auth_user_name and configuration.basic_auth_password:
            options["auth"] = httpx.BasicAuth(
                configuration.basic_auth_user_name,
                configuration.basic_auth_password,
            )

        if self._transport is not None:
            options["transport"] = self._transport

        return httpx.AsyncClient(**options)

    def build_request(
        self,
        client: httpx.AsyncClient,
        content: str,
        attributes: Optional[dict[str, str]],
        configuration: ConfigurationEntry,
    ) -> httpx.Request:
        """
        Build the outbound request for one message.

        Args:
            client: Client returned by create_client
            content: Raw message payload
            attributes: Message metadata, forwarded as headers
            configuration: Queue configuration

        Returns:
            Request ready to send
        """
        path_and_query = httpx.URL(configuration.redrive_url).raw_path.decode("ascii")

        if configuration.use_get:
            request = self._create_get_request(client, content, path_and_query)
        else:
            request = client.build_request(
                configuration.http_method,
                path_and_query,
                content=content,
                headers={"Content-Type": "application/json"},
            )

        self._add_authentication(request, configuration)
        self._add_attributes(request, attributes)
        return request

    def _create_get_request(
        self,
        client: httpx.AsyncClient,
        content: str,
        path_and_query: str,
    ) -> httpx.Request:
        try:
            params = self._query_parameters(content)
        except MalformedMessageError as e:
            # Degrade to a bare GET rather than failing the message
            logger.warning(f"Error parsing message and adding query parameters. GET request might be incorrect. {e}")
            logger.warning(f"Message was [{content}]")
            params = {}

        # Appended, so parameters already in the URL keep their values
        url = httpx.URL(path_and_query)
        for name, value in params.items():
            url = url.copy_add_param(name, value)

        return client.build_request("GET", url)

    @staticmethod
    def _query_parameters(content: str) -> dict[str, str]:
        """Flatten a JSON object into query parameters (non-strings as JSON text)."""
        try:
            data = json.loads(content)
        except (TypeError, ValueError) as e:
            raise MalformedMessageError(f"Message is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise MalformedMessageError(
                f"Message is a JSON {type(data).__name__}, expected an object"
            )

        params = {}
        for name, value in data.items():
            if isinstance(value, str):
                params[name] = value
            elif value is None:
                params[name] = ""
            else:
                params[name] = json.dumps(value)
        return params

    @staticmethod
    def _add_authentication(request: httpx.Request, configuration: ConfigurationEntry) -> None:
        # Basic auth is attached to the client in create_client
        if configuration.aws_gateway_token:
            request.headers["x-api-key"] = configuration.aws_gateway_token

        if configuration.auth_token:
            request.headers["Authorization"] = configuration.auth_token

    @staticmethod
    def _add_attributes(request: httpx.Request, attributes: Optional[dict[str, str]]) -> None:
        if not attributes:
            return

        for key, value in attributes.items():
            if key and value:
                request.headers[key] = value

    async def _send_request(
        self,
        client: httpx.AsyncClient,
        request: httpx.Request,
        configuration: ConfigurationEntry,
    ) -> None:
        """
        Send the request and interpret the response.

        Raises:
            httpx.TransportError: Connection, TLS or timeout failure, unchanged
            HttpStatusError: Any status other than 200 or 201
        """
        logger.trace(f"Sending {request.method} to {configuration.redrive_url}")
        try:
            response = await client.send(request)
        except httpx.TransportError as e:
            logger.trace(f"{request.method} to {configuration.redrive_url} failed (error [{e!r}])")
            raise

        if response.status_code in self.ACCEPTED_STATUS_CODES:
            logger.trace(f"{request.method} to {configuration.redrive_url} successful")
            return

        logger.trace(
            f"{request.method} to {configuration.redrive_url} failed (status code [{response.status_code}])"
        )
        raise HttpStatusError(response.status_code, response.text)
