import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import aiohttp

from workflow_engine.errors import ConfigurationError, ExternalCallError
from workflow_engine.models.factory.Nodes import ExternalCallNodeModel
from workflow_engine.node_system.Node import Node

logger = logging.getLogger(__name__)

INPUT_TOKEN = '{{input}}'


class NodeExternalCall(Node):
    """
    External call node - issues an HTTP request and returns
    ``{"status", "data", "input"}``.

    A string body may contain the ``{{input}}`` token, replaced by the JSON
    encoding of the resolved input before the body is parsed. Mapping and
    list bodies are walked instead; see ``substitute_input``. The body is
    only sent for non-GET methods. Non-2xx statuses are returned, not
    raised; transport failures and non-JSON responses raise
    ExternalCallError.
    """
    config_model = ExternalCallNodeModel
    DEFAULT_TIMEOUT = 30.0

    def __init__(self, request_timeout: float = DEFAULT_TIMEOUT, **kwargs) -> None:
        super().__init__(**kwargs)
        self.request_timeout = request_timeout

    def build_headers(self, headers) -> Dict[str, str]:
        if isinstance(headers, str):
            try:
                headers = json.loads(headers) if headers.strip() else {}
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid headers for node '{self.node_id}': {e}",
                                         node_id=self.node_id) from e
        return {'Content-Type': 'application/json', **(headers or {})}

    def build_body(self, body, value) -> Any:
        if body is None or body == '':
            return None
        if not isinstance(body, str):
            return self.substitute_input(body, value)
        if INPUT_TOKEN in body:
            body = body.replace(INPUT_TOKEN, json.dumps(value, default=str))
            try:
                return json.loads(body)
            except json.JSONDecodeError as e:
                raise ExternalCallError(f"Request body for node '{self.node_id}' is not valid JSON: {e}",
                                        node_id=self.node_id) from e
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return body

    @classmethod
    def substitute_input(cls, body: Any, value: Any) -> Any:
        """
        Replace the input token inside a structured body. A string that is
        exactly the token becomes the raw input; a string containing it gets
        the input's text spliced in.
        """
        if isinstance(body, dict):
            return {key: cls.substitute_input(item, value) for key, item in body.items()}
        if isinstance(body, list):
            return [cls.substitute_input(item, value) for item in body]
        if isinstance(body, str):
            if body == INPUT_TOKEN:
                return value
            if INPUT_TOKEN in body:
                return body.replace(INPUT_TOKEN, '' if value is None else str(value))
        return body

    async def fetch(self, session, method: str, url: str, headers: Dict[str, str], payload: Optional[Any]):
        kwargs = {'method': method, 'url': url, 'headers': headers}
        if payload is not None:
            kwargs['json'] = payload

        parts = urlsplit(url)
        safe_url = f"{parts.scheme}://{parts.netloc}{parts.path}"
        logger.info("NodeExternalCall:%s %s %s", self.node_id, method, safe_url)

        async with session.request(**kwargs) as response:
            if self.debug:
                logger.debug("NodeExternalCall:%s response status=%s", self.node_id, response.status)
            try:
                data = await response.json(content_type=None)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ExternalCallError(
                    f"Response from {safe_url} is not valid JSON (status {response.status})",
                    node_id=self.node_id,
                ) from e
            return response.status, data

    async def process(self, inputs, config: ExternalCallNodeModel):
        if not config.url:
            raise ConfigurationError(f"External call node '{self.node_id}' requires a url",
                                     node_id=self.node_id)
        value = self.primary_input(inputs)
        headers = self.build_headers(config.headers)
        payload = self.build_body(config.body, value) if config.method != 'GET' else None
        timeout = aiohttp.ClientTimeout(total=config.timeout or self.request_timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                status, data = await self.fetch(session, config.method, config.url, headers, payload)
        except ExternalCallError:
            raise
        except (aiohttp.ClientError, TimeoutError) as e:
            raise ExternalCallError(f"API request failed: {e}", node_id=self.node_id) from e

        logger.info("NodeExternalCall:%s request completed with status %s", self.node_id, status)
        return {
            'status': status,
            'data': data,
            'input': value,
        }
