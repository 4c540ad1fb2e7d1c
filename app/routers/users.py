# =============================================================================
# app/routers/users.py - User Search & Profile Endpoints
# =============================================================================
# Handles user search, public profiles and the caller's own profile.
# Search and profile reads are public; edits require authentication.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile

from app.auth import get_current_user, AuthUser
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError
from core.models.user import UserProfileUpdate, UserPublic, UserSearchResponse
from core.services.storage_service import StorageService
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Search
# =============================================================================

@router.get("", response_model=UserSearchResponse)
async def search_users(
    q: Annotated[str | None, Query(description="Name or email fragment (min 2 characters)")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Results per page")] = 10,
    offset: Annotated[int, Query(ge=0, description="Results to skip")] = 0,
):
    """
    Search users by full name, display name or email.

    Matching is case-insensitive and partial. `total` counts every
    match, not just this page.
    """
    return UserService.search_users(q, limit=limit, offset=offset)


# =============================================================================
# Own Profile
# =============================================================================

@router.patch("/me", response_model=UserPublic)
async def update_my_profile(
    request: UserProfileUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Update the caller's profile.

    Only the fields present in the body are changed.
    """
    return UserService.update_profile(user.id, request.to_update_dict())


@router.post("/me/avatar")
async def upload_avatar(
    file: Annotated[UploadFile, File(description="Profile image")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a new profile image.

    The image is stored in the `avatars` bucket and the profile's
    `profile_image_url` is pointed at it.
    """
    content_type = file.content_type
    if content_type not in settings.allowed_avatar_types_list:
        raise InvalidFileTypeError(content_type, settings.allowed_avatar_types_list)

    content = await file.read()
    file_size_mb = len(content) / (1024 * 1024)

    if len(content) > settings.max_avatar_size_bytes:
        raise FileTooLargeError(file_size_mb, settings.MAX_AVATAR_SIZE_MB)

    logger.info(f"Processing avatar upload for {user.id} ({file_size_mb:.2f}MB)")

    path = StorageService.upload_avatar(user.id, content, content_type)
    image_url = StorageService.get_public_url(path)
    profile = UserService.set_profile_image(user.id, image_url)

    return {
        "profile_image_url": image_url,
        "user": profile,
    }


# =============================================================================
# Public Profile
# =============================================================================

@router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: Annotated[UUID, Path(description="User UUID")],
):
    """Get a user's public profile."""
    return UserService.get_profile(user_id)
