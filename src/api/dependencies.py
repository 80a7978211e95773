"""
Common dependencies for Flowboard API endpoints.

The application owns one ERP client and one graph memo for its lifetime;
these dependencies hand them to the routers.
"""

from typing import Annotated

from fastapi import Depends, Query, Request

from ..client import ErpClient
from ..exceptions.http import unsupported_format
from ..services.graph import EXPORT_FORMATS, WorkflowGraphMemo


def get_erp_client(request: Request) -> ErpClient:
    """ERP client created in the application lifespan."""
    return request.app.state.erp_client


def get_graph_memo(request: Request) -> WorkflowGraphMemo:
    """Rendered graph memo created in the application lifespan."""
    return request.app.state.graph_memo


def get_output_format(
    format: str = Query("json", description="Output format: json, mermaid or dot"),  # noqa: A002
) -> str:
    """
    Validate the requested export format.

    Raises:
        HTTPException: 400 if the format is not supported
    """
    if format not in EXPORT_FORMATS:
        raise unsupported_format(format, EXPORT_FORMATS)
    return format


ErpClientDep = Annotated[ErpClient, Depends(get_erp_client)]
GraphMemoDep = Annotated[WorkflowGraphMemo, Depends(get_graph_memo)]
OutputFormatDep = Annotated[str, Depends(get_output_format)]
