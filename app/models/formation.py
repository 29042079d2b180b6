"""
Formazione salvata per squadra: una riga TeamFormation (upsert per team)
e una riga FormationPosition per ogni posizione occupata.
Le posizioni vuote non vengono salvate: il layout si rigenera dalla notazione.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class TeamFormation(Base):
    __tablename__ = "team_formations"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False, unique=True, index=True,
    )
    formation_name = Column(String(16), nullable=False)
    team_size = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class FormationPosition(Base):
    __tablename__ = "formation_positions"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    position_id = Column(String(16), nullable=False)
    player_id = Column(
        Integer, ForeignKey("players.id", ondelete="CASCADE"),
        nullable=False,
    )
    position_name = Column(String(64), nullable=True)
    x_coordinate = Column(Float, nullable=False)
    y_coordinate = Column(Float, nullable=False)

    # --- Relazioni ---
    player = relationship("Player", lazy="joined")

    # --- Vincoli ---
    __table_args__ = (
        Index(
            "uq_formation_positions_team_position",
            "team_id", "position_id",
            unique=True,
        ),
    )
