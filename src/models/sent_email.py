import uuid

from sqlalchemy import Column, String, Text
from src.core.database import Base


class SentEmail(Base):
    __tablename__ = "sending_emails"

    id = Column(String(36), primary_key=True,
                default=lambda: str(uuid.uuid4()))
    to = Column(String(255), index=True, nullable=False)
    subject = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    # verification, confirmation, reset_password
    type = Column(String(32), nullable=False)
    message_id = Column(String(255), nullable=True)
    timestamp = Column(String(32), nullable=False)
