import functools
import inspect
import time
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = {"api_key", "x-api-key", "private_key", "authorization", "password", "token", "bearer", "secret"}


def _redact(value):
    """Mask sensitive keys in inputs, outputs and node configs before they are logged."""
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if isinstance(value, dict):
        return {k: ("***" if str(k).lower() in SENSITIVE_KEYS else _redact(v)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(v) for v in value)
    return value


def flow_telemetry(func):
    qualname = func.__qualname__.split('.')[0]
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"Function {qualname} is not a coroutine function. "
                        f"flow_telemetry can only be applied to coroutine functions.")

    @functools.wraps(func)
    async def wrapper(self, inputs, config, *args, **kwargs):
        debug = self.get_debug()
        node_id = getattr(self, 'node_id', None)
        start_time = time.monotonic()
        logger.info("Executing %s:%s...", qualname, node_id)
        if debug:
            logger.debug("Node %s:%s inputs: %s config: %s", qualname, node_id, _redact(inputs), _redact(config))
        try:
            output = await func(self, inputs, config, *args, **kwargs)
        except Exception as e:
            logger.info("%s:%s failed after %.4f seconds: %s",
                        qualname, node_id, time.monotonic() - start_time, e)
            raise
        execution_time = time.monotonic() - start_time
        logger.info("%s:%s execution time: %.4f seconds", qualname, node_id, execution_time)
        if debug:
            logger.debug("Node %s:%s output: %s", qualname, node_id, _redact(output))
        return output

    return wrapper
