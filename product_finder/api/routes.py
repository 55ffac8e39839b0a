"""API routes for product search and recommendations."""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from product_finder.api.dependencies import get_orchestrator
from product_finder.config import get_settings
from product_finder.exceptions import ErrorCode
from product_finder.logging_config import get_logger
from product_finder.search.models import ImageSearchResponse, SearchResponse
from product_finder.search.orchestrator import (
    IMAGE_REQUIRED,
    MESSAGE_REQUIRED,
    QUERY_REQUIRED,
    ProductSearchOrchestrator,
)

logger = get_logger(__name__)


router = APIRouter(prefix="/api/products", tags=["Products"])


class ChatRequest(BaseModel):
    """Request body for a recommendation chat."""

    # Optional so a missing message gets the same 400 body as an empty one
    message: str | None = Field(default=None, description="User message")


class SearchRequest(BaseModel):
    """Request body for a plain product search."""

    query: str | None = Field(default=None, description="Search query")


# Malformed bodies get the same 400 as an empty field
INVALID_REQUEST_MESSAGES = {
    f"{router.prefix}/chat": MESSAGE_REQUIRED,
    f"{router.prefix}/search": QUERY_REQUIRED,
    f"{router.prefix}/chat_with_image": IMAGE_REQUIRED,
}


def invalid_request_response(path: str) -> JSONResponse | None:
    """400 SearchResponse for a product route whose body failed to parse.

    Returns None for paths outside the product routes.
    """
    message = INVALID_REQUEST_MESSAGES.get(path.rstrip("/"))
    if message is None:
        return None

    response_type = (
        ImageSearchResponse if message == IMAGE_REQUIRED else SearchResponse
    )
    return to_json_response(
        response_type(
            success=False,
            query=None,
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
        )
    )


def to_json_response(result: SearchResponse) -> JSONResponse:
    """Serialize a search response with the status code its outcome implies."""
    if result.success:
        status_code = status.HTTP_200_OK
    elif result.error_code == ErrorCode.VALIDATION_ERROR:
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


@router.post("/chat", response_model=SearchResponse)
async def chat_endpoint(
    request: ChatRequest,
    orchestrator: ProductSearchOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Recommend products for a free-text message."""
    result = await orchestrator.handle(
        request.message,
        timeout=get_settings().request_timeout,
    )
    return to_json_response(result)


@router.post("/search", response_model=SearchResponse)
async def search_endpoint(
    request: SearchRequest,
    orchestrator: ProductSearchOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """List products relevant to a query."""
    result = await orchestrator.search(
        request.query,
        timeout=get_settings().request_timeout,
    )
    return to_json_response(result)


@router.post("/chat_with_image", response_model=ImageSearchResponse)
async def chat_with_image_endpoint(
    message: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    orchestrator: ProductSearchOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Recommend products for an uploaded image and optional message."""
    content = await image.read() if image is not None else None
    mime_type = image.content_type if image is not None else None

    logger.info(
        "Image query received",
        extra={"mime_type": mime_type, "bytes": len(content or b"")},
    )

    result = await orchestrator.handle_with_image(
        message,
        content,
        mime_type,
        timeout=get_settings().request_timeout,
    )
    return to_json_response(result)
