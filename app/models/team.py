"""Team ORM model. Campi di ruolo usati dal controllo permessi formazione."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from app.core.database import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    captain_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    team_size = Column(Integer, nullable=False, default=11)
    # Lista di user id con permesso di modifica (oltre a owner e capitano)
    authorized_members = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
