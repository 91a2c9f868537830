# core/chat_log_manager.py

from typing import List
from .models import ChatLogEntry, Session
from .record_store import RecordStore, CHATBOT_LOGS

class ChatLogManager:
    """Handles persistence of user/assistant exchanges."""
    def __init__(self, store: RecordStore):
        self.store = store

    def save_exchange(self, session: Session, message: str, response: str) -> ChatLogEntry:
        entry = ChatLogEntry(user_id=session.user_id, message=message, response=response)
        self.store.insert(session, CHATBOT_LOGS, [entry.model_dump()])
        print(f"---CHAT LOG MANAGER: Saved exchange for user {session.user_id}---")
        return entry

    def load_history(self, session: Session, limit: int = 50) -> List[ChatLogEntry]:
        """Most recent exchanges, oldest first so they read as a transcript."""
        rows = self.store.select(session, CHATBOT_LOGS, limit=limit)
        return [ChatLogEntry(**row) for row in reversed(rows)]
