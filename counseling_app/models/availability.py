from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Time
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base


class ConsultationSlot(Base):
    """One recurring weekly availability window of a psychologist."""

    __tablename__ = "waktu_konsultasi"

    id = Column(Integer, primary_key=True, index=True)
    psikolog_id = Column(
        Integer,
        ForeignKey("users.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    day = Column(String(20), nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    psikolog = relationship("User", back_populates="consultation_slots")

    def __repr__(self):
        return (
            f"<ConsultationSlot(id={self.id}, psikolog_id={self.psikolog_id}, "
            f"day='{self.day}', {self.start_time}-{self.end_time})>"
        )
