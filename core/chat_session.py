# core/chat_session.py

from typing import List, Optional
from agents.field_assistant import FieldAssistant, GREETING
from .chat_log_manager import ChatLogManager
from .errors import AssistantRequestError
from .models import ChatMessage, ChatbotRequest, Session

class ChatSession:
    """
    The ordered, append-only transcript of one assistant conversation.
    Only one request may be in flight at a time.
    """
    def __init__(self, session: Session, assistant: FieldAssistant, chat_log: ChatLogManager):
        self.session = session
        self.assistant = assistant
        self.chat_log = chat_log
        self.messages: List[ChatMessage] = [ChatMessage(content=GREETING, is_from_user=False)]
        self.pending = False

    def send(self, text: str, api_key: Optional[str] = None) -> ChatMessage:
        if self.pending:
            raise AssistantRequestError("Please wait for the current reply before sending another message.")
        if not (text or "").strip():
            raise AssistantRequestError("Message must not be empty.")

        self.pending = True
        try:
            self.messages.append(ChatMessage(content=text, is_from_user=True))
            request = ChatbotRequest(message=text, user_id=self.session.user_id, api_key=api_key)
            reply = ChatMessage(content=self.assistant.resolve(request), is_from_user=False)
            self.messages.append(reply)
            self.chat_log.save_exchange(self.session, text, reply.content)
        finally:
            self.pending = False
        return reply
