"""Metadata suggestions for the blog creation form."""

from fastapi import APIRouter

from app.controllers.dependencies import TextClientDep
from app.services.metadata_suggestions import suggest_metadata
from app.views import SuggestMetadataRequest, SuggestMetadataResponse

router = APIRouter(prefix="/api", tags=["metadata"])


@router.post("/suggest-blog-metadata", response_model=SuggestMetadataResponse)
async def suggest_blog_metadata(
    payload: SuggestMetadataRequest,
    client: TextClientDep,
) -> SuggestMetadataResponse:
    """Suggest keywords, audience and context for a topic. Always answers 200."""

    suggestion = await suggest_metadata(payload.topic, client=client)
    return SuggestMetadataResponse(
        keywords=suggestion.keywords,
        target_audience=suggestion.target_audience,
        additional_context=suggestion.additional_context,
    )
