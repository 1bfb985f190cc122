from datetime import datetime
from pydantic import Field
from typing import Optional, List, Union

from kneeklinic.schemas.auth import UserType
from kneeklinic.schemas.response import ApiModel


class Participant(ApiModel):
    """User summary embedded in messages, conversations and posts."""

    id: str = Field(..., alias="_id")
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    user_type: UserType = "patient"

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Message(ApiModel):
    id: str = Field(..., alias="_id")
    sender_id: Union[Participant, str]
    receiver_id: str
    sender_type: UserType
    receiver_type: UserType
    subject: Optional[str] = None
    message: str
    is_read: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def sender_ref(self) -> str:
        """Sender id whether or not the backend populated the sender."""
        if isinstance(self.sender_id, Participant):
            return self.sender_id.id
        return self.sender_id


class Conversation(ApiModel):
    user_id: str
    user: Union[Participant, str]
    last_message: str = ""
    last_message_time: Optional[datetime] = None
    unread_count: int = 0

    @property
    def participant_name(self) -> str:
        if isinstance(self.user, Participant):
            return self.user.display_name
        return self.user

    @property
    def participant_role(self) -> str:
        if isinstance(self.user, Participant):
            return self.user.user_type
        return "unknown"


class SendMessageData(ApiModel):
    receiver_id: str
    receiver_type: UserType = "doctor"
    subject: Optional[str] = None
    message: str


class ConversationsResponse(ApiModel):
    conversations: List[Conversation] = []


class MessagesResponse(ApiModel):
    messages: List[Message] = []


class SendMessageResponse(ApiModel):
    message_data: Message
    message: Optional[str] = None
