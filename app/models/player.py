"""Player ORM model. Un utente iscritto nella rosa di una squadra."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(String(50), nullable=True)
    skill_level = Column(Integer, nullable=False, default=5)
    is_active = Column(Boolean, nullable=False, default=True)

    user = relationship("User", lazy="joined")
