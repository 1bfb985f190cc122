"""
kneeklinic/services/community_service.py

Purpose: Patient community forum

- Posts and replies
- Likes
- Deleting own content
"""

from typing import List

from kneeklinic.core.errors import parse_response
from kneeklinic.core.exceptions import ValidationError
from kneeklinic.core.logging import get_logger
from kneeklinic.schemas.community import (
    CommunityPost,
    CommunityReply,
    CreatePostData,
    CreateReplyData,
    PostsResponse,
    PostResponse,
    RepliesResponse,
    ReplyResponse,
)
from kneeklinic.schemas.response import ApiResponse
from kneeklinic.services.api_client import ApiClient
from kneeklinic.utils.constants import EMPTY_CONTENT
from kneeklinic.utils.validation_utils import clean_text

logger = get_logger(__name__)


def _require_content(content: str) -> str:
    body = clean_text(content)
    if not body:
        raise ValidationError(EMPTY_CONTENT, details={"content": EMPTY_CONTENT})
    return body


class CommunityService:
    """Service for the /community endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_posts(self) -> List[CommunityPost]:
        data = await self.client.get("community/posts")
        return parse_response(PostsResponse, data).posts

    async def get_post(self, post_id: str) -> CommunityPost:
        data = await self.client.get(f"community/posts/{post_id}")
        return parse_response(PostResponse, data).post

    async def get_replies(self, post_id: str) -> List[CommunityReply]:
        data = await self.client.get(f"community/posts/{post_id}/replies")
        return parse_response(RepliesResponse, data).replies

    async def create_post(self, content: str) -> CommunityPost:
        payload = CreatePostData(content=_require_content(content))
        data = await self.client.post("community/posts", json=payload.to_payload())
        post = parse_response(PostResponse, data).post
        logger.info(f"Community post created: {post.id}")
        return post

    async def create_reply(self, post_id: str, content: str) -> CommunityReply:
        payload = CreateReplyData(content=_require_content(content))
        data = await self.client.post(f"community/posts/{post_id}/replies", json=payload.to_payload())
        return parse_response(ReplyResponse, data).reply

    async def like_post(self, post_id: str) -> ApiResponse:
        data = await self.client.post(f"community/posts/{post_id}/like")
        return parse_response(ApiResponse, data)

    async def like_reply(self, reply_id: str) -> ApiResponse:
        data = await self.client.post(f"community/replies/{reply_id}/like")
        return parse_response(ApiResponse, data)

    async def delete_post(self, post_id: str) -> ApiResponse:
        data = await self.client.delete(f"community/posts/{post_id}")
        logger.info(f"Community post deleted: {post_id}")
        return parse_response(ApiResponse, data)

    async def delete_reply(self, reply_id: str) -> ApiResponse:
        data = await self.client.delete(f"community/replies/{reply_id}")
        return parse_response(ApiResponse, data)
