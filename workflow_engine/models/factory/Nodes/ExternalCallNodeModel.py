from typing import Any, Optional

from pydantic import field_validator, model_validator

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel

HTTP_METHODS = {'GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'HEAD', 'OPTIONS'}


class ExternalCallNodeModel(BaseNodeModel):
    """
    External call node model - accepts various field names from the editor.
    """
    url: Optional[str] = None
    endpoint: Optional[str] = None  # alias for url
    method: str = "GET"
    headers: Optional[dict[str, Any] | str] = None
    body: Optional[dict[str, Any] | list | str] = None
    timeout: Optional[float] = None

    @field_validator('method')
    @classmethod
    def validate_method(cls, v: str) -> str:
        method = v.upper().strip()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method '{v}'")
        return method

    @model_validator(mode='after')
    def resolve_aliases(self):
        if self.url is None and self.endpoint is not None:
            self.url = self.endpoint
        return self
