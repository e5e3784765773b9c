"""
Conversation service: SQLAlchemy-backed store for conversations and messages.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from narumate.core.utils import as_utc, derive_title, utcnow
from narumate.models.conversation import Conversation, DEFAULT_TITLE
from narumate.models.message import Message, MESSAGE_ROLES
from narumate.services.store import ConversationStore

logger = logging.getLogger(__name__)

MESSAGE_TICK = timedelta(microseconds=1)


class SqlConversationStore(ConversationStore):
    """
    Conversation store over a SQLAlchemy session factory.

    Each operation runs in its own short-lived session so independent reads
    can be issued from different threads.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        user_id: str = "anonymous",
        now: Callable[[], datetime] = utcnow
    ):
        self.session_factory = session_factory
        self.user_id = user_id
        self.now = now

    # ==================== CONVERSATIONS ====================

    def create_conversation(self, title: Optional[str] = None) -> Optional[Conversation]:
        """Create a new conversation, defaulting the title to 'New Conversation'."""
        moment = self.now()
        with self.session_factory() as db:
            try:
                conversation = Conversation(
                    title=title or DEFAULT_TITLE,
                    user_id=self.user_id,
                    created_at=moment,
                    updated_at=moment
                )
                db.add(conversation)
                db.commit()
                db.refresh(conversation)
                logger.info(f"Created conversation {conversation.id}")
                return conversation
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error creating conversation: {str(e)}")
                return None

    def list_conversations(self) -> List[Conversation]:
        """Get all conversations, most recently updated first."""
        with self.session_factory() as db:
            try:
                return db.query(Conversation).filter(
                    Conversation.user_id == self.user_id
                ).order_by(Conversation.updated_at.desc()).all()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching conversations: {str(e)}")
                return []

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Get a conversation by id."""
        with self.session_factory() as db:
            try:
                return db.query(Conversation).filter(
                    Conversation.id == conversation_id
                ).first()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching conversation {conversation_id}: {str(e)}")
                return None

    def rename_conversation(self, conversation_id: str, title: str) -> bool:
        """Update the conversation title. Blank titles are refused."""
        title = (title or "").strip()
        if not title:
            logger.warning(f"Refusing blank title for conversation {conversation_id}")
            return False

        with self.session_factory() as db:
            try:
                updated = db.query(Conversation).filter(
                    Conversation.id == conversation_id
                ).update({Conversation.title: title}, synchronize_session=False)
                db.commit()
                return updated > 0
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error updating conversation title: {str(e)}")
                return False

    def delete_conversation(self, conversation_id: str) -> bool:
        """Delete a conversation; messages and moods go with it."""
        with self.session_factory() as db:
            try:
                conversation = db.query(Conversation).filter(
                    Conversation.id == conversation_id
                ).first()
                if not conversation:
                    return False
                db.delete(conversation)
                db.commit()
                logger.info(f"Deleted conversation {conversation_id}")
                return True
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error deleting conversation: {str(e)}")
                return False

    # ==================== MESSAGES ====================

    def append_message(self, conversation_id: str, role: str, content: str) -> Optional[Message]:
        """
        Add a message to a conversation.

        The insert and the conversation update (updated_at bump, title on the
        first user message) are two separate commits; a failure in the second
        leaves the message saved with a stale updated_at.
        """
        if role not in MESSAGE_ROLES:
            logger.error(f"Invalid message role '{role}'")
            return None

        moment = self.now()
        with self.session_factory() as db:
            try:
                conversation = db.query(Conversation).filter(
                    Conversation.id == conversation_id
                ).first()
                if not conversation:
                    logger.error(f"Conversation {conversation_id} not found, message not saved")
                    return None

                is_first_user_message = role == "user" and db.query(Message.id).filter(
                    Message.conversation_id == conversation_id,
                    Message.role == "user"
                ).first() is None

                # Timestamps are strictly increasing within a conversation
                latest = db.query(func.max(Message.timestamp)).filter(
                    Message.conversation_id == conversation_id
                ).scalar()
                if latest is not None and as_utc(latest) >= moment:
                    moment = as_utc(latest) + MESSAGE_TICK

                message = Message(
                    conversation_id=conversation_id,
                    role=role,
                    content=content,
                    timestamp=moment,
                    created_at=moment
                )
                db.add(message)
                db.commit()
                db.refresh(message)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error adding message: {str(e)}")
                return None

            try:
                conversation.updated_at = moment
                if is_first_user_message:
                    conversation.title = derive_title(content)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error updating conversation {conversation_id} after message insert: {str(e)}")

            return message

    def list_messages(self, conversation_id: str) -> List[Message]:
        """Get messages for a conversation in logical timestamp order."""
        with self.session_factory() as db:
            try:
                return db.query(Message).filter(
                    Message.conversation_id == conversation_id
                ).order_by(Message.timestamp.asc(), Message.created_at.asc()).all()
            except SQLAlchemyError as e:
                logger.error(f"Error fetching messages: {str(e)}")
                return []

    def delete_message(self, message_id: str) -> bool:
        """Delete a message."""
        with self.session_factory() as db:
            try:
                deleted = db.query(Message).filter(
                    Message.id == message_id
                ).delete(synchronize_session=False)
                db.commit()
                return deleted > 0
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error deleting message: {str(e)}")
                return False
