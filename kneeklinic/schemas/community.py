from datetime import datetime
from pydantic import Field
from typing import Optional, List, Union

from kneeklinic.schemas.messages import Participant
from kneeklinic.schemas.response import ApiModel


class _AuthoredContent(ApiModel):
    id: str = Field(..., alias="_id")
    author_id: Union[Participant, str]
    content: str
    likes: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def author_name(self) -> str:
        if isinstance(self.author_id, Participant):
            return self.author_id.display_name
        return "Anonymous"

    def is_liked_by(self, user_id: str) -> bool:
        return user_id in self.likes


class CommunityPost(_AuthoredContent):
    reply_count: int = 0


class CommunityReply(_AuthoredContent):
    post_id: str


class CreatePostData(ApiModel):
    content: str


class CreateReplyData(ApiModel):
    content: str


class PostsResponse(ApiModel):
    posts: List[CommunityPost] = []


class PostResponse(ApiModel):
    post: CommunityPost
    message: Optional[str] = None


class RepliesResponse(ApiModel):
    replies: List[CommunityReply] = []


class ReplyResponse(ApiModel):
    reply: CommunityReply
    message: Optional[str] = None
