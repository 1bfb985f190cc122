"""
kneeklinic/services/message_service.py

Purpose: Patient <-> doctor messaging

- Conversation list and history
- Sending messages and read receipts
"""

from typing import List, Optional

from kneeklinic.core.errors import parse_response
from kneeklinic.core.exceptions import ValidationError
from kneeklinic.core.logging import get_logger
from kneeklinic.schemas.messages import (
    Conversation,
    Message,
    SendMessageData,
    ConversationsResponse,
    MessagesResponse,
    SendMessageResponse,
)
from kneeklinic.services.api_client import ApiClient
from kneeklinic.utils.constants import EMPTY_CONTENT
from kneeklinic.utils.validation_utils import clean_text

logger = get_logger(__name__)


class MessageService:
    """Service for the /messages endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_conversations(self) -> List[Conversation]:
        data = await self.client.get("messages/conversations")
        return parse_response(ConversationsResponse, data).conversations

    async def get_conversation(self, user_id: str) -> List[Message]:
        """Messages exchanged with one user, oldest first."""
        data = await self.client.get(f"messages/conversation/{user_id}")
        return parse_response(MessagesResponse, data).messages

    async def send_message(
        self,
        receiver_id: str,
        message: str,
        receiver_type: str = "doctor",
        subject: Optional[str] = None
    ) -> Message:
        """
        Sends a message.

        Raises:
            ValidationError: If the message is blank
        """
        body = clean_text(message)
        if not body:
            raise ValidationError(EMPTY_CONTENT, details={"message": EMPTY_CONTENT})

        payload = SendMessageData(
            receiver_id=receiver_id,
            receiver_type=receiver_type,
            subject=subject,
            message=body,
        )
        data = await self.client.post("messages/send", json=payload.to_payload())
        sent = parse_response(SendMessageResponse, data).message_data
        logger.info(f"Message sent to {receiver_id}")
        return sent

    async def mark_as_read(self, message_id: str) -> None:
        await self.client.put(f"messages/{message_id}/read")
