"""Tag API endpoints."""

from fastapi import APIRouter, Depends

from notemind.dependencies import get_current_user, get_tag_service
from notemind.models.user import User
from notemind.schemas.tag import TagCreate, TagListResponse, TagResponse, TagUpdate
from notemind.services.tag import TagService

router = APIRouter(prefix="/api/v1/tags", tags=["Tags"])


@router.post("/", response_model=TagResponse, status_code=201)
def create_tag(
    body: TagCreate,
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> TagResponse:
    """Create a tag."""
    return TagResponse.model_validate(service.create_tag(user.id, body.name, body.color))


@router.get("/", response_model=TagListResponse)
def list_tags(
    search: str | None = None,
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """List the current user's tags alphabetically."""
    tags = service.get_user_tags(user.id, search=search)
    return TagListResponse(items=[TagResponse.model_validate(t) for t in tags], total=len(tags))


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(
    tag_id: int,
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> TagResponse:
    return TagResponse.model_validate(service.get_tag(tag_id, user.id))


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: int,
    body: TagUpdate,
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> TagResponse:
    return TagResponse.model_validate(service.update_tag(tag_id, user.id, name=body.name, color=body.color))


@router.delete("/{tag_id}")
def delete_tag(
    tag_id: int,
    user: User = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> dict:
    """Delete a tag and detach it from notes."""
    service.delete_tag(tag_id, user.id)
    return {"detail": "Tag deleted"}
