"""Tool-call adapter.

Exposes the lookup operations as callable tools (name + JSON input schema) for
an agent/LLM host. The host owns the transport and the session; this module
only validates arguments, dispatches to `CompanyLookupService` and shapes the
reply. Errors come back as `ToolResult(is_error=True)` instead of exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from companyinfo.adapters.json_exporter import to_json_text
from companyinfo.core.errors import CompanyInfoError
from companyinfo.core.services.company_pipeline import CompanyLookupService

logger = logging.getLogger(__name__)


class CompanyIdArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    companyID: str = Field(  # noqa: N815 - wire name
        ...,
        min_length=1,
        description="The company ID (Tax ID / Identification Code)",
    )


class ToolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def text(cls, text: str, *, is_error: bool = False) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=is_error)


_COMPANY_ID_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "companyID": {
            "type": "string",
            "description": "The company ID (Tax ID / Identification Code)",
        }
    },
    "required": ["companyID"],
}

GET_COMPANY_FULL_INFO = ToolDefinition(
    name="get_company_full_info",
    description="Retrieves comprehensive company information (Tax and Public) from the tax authority.",
    inputSchema=_COMPANY_ID_SCHEMA,
)
GET_COMPANY_ENREG_INFO = ToolDefinition(
    name="get_company_enreg_info",
    description="Retrieves company registration details and applications from the business registry.",
    inputSchema=_COMPANY_ID_SCHEMA,
)
GET_COMPANY_COMBINED_INFO = ToolDefinition(
    name="get_company_combined_info",
    description="Retrieves tax authority and business registry information in one combined record.",
    inputSchema=_COMPANY_ID_SCHEMA,
)

ALL_TOOLS: tuple[ToolDefinition, ...] = (
    GET_COMPANY_FULL_INFO,
    GET_COMPANY_ENREG_INFO,
    GET_COMPANY_COMBINED_INFO,
)


def list_tools() -> list[dict[str, Any]]:
    """Tool declarations in their wire shape (`name`, `description`, `inputSchema`)."""

    return [tool.model_dump(by_alias=True) for tool in ALL_TOOLS]


class ToolHandler:
    """Dispatches tool calls to the lookup service."""

    def __init__(self, service: CompanyLookupService | None = None) -> None:
        self._service = service or CompanyLookupService()
        self._handlers: dict[str, Callable[[str], Awaitable[BaseModel | None]]] = {
            GET_COMPANY_FULL_INFO.name: self._service.fetch_tax_record,
            GET_COMPANY_ENREG_INFO.name: self._service.fetch_registry_record,
            GET_COMPANY_COMBINED_INFO.name: self._service.aggregate,
        }

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        logger.info("tool call: %s", name)
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("unknown tool called: %s", name)
            return ToolResult.text(f"Unknown tool: {name}", is_error=True)

        try:
            args = CompanyIdArgs.model_validate(arguments or {})
        except ValidationError as exc:
            return ToolResult.text(f"Invalid arguments for {name}: {exc.errors()[0]['msg']}", is_error=True)

        try:
            result = await handler(args.companyID)
        except (CompanyInfoError, ValueError) as exc:
            logger.error("error executing tool %s: %s", name, exc)
            return ToolResult.text(f"Internal server error during {name} execution: {exc}", is_error=True)

        return ToolResult.text(to_json_text(result))
