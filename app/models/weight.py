from datetime import date
from sqlalchemy import Integer, String, Float, Date, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class WeightEntry(Base):
    """One weighing of one cat on one calendar day."""

    __tablename__ = "weights"
    __table_args__ = (UniqueConstraint("subject", "date", name="uq_weights_subject_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    # Stored in a column literally named "date"; `day` avoids shadowing datetime.date.
    day: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<WeightEntry id={self.id} subject={self.subject!r} day={self.day} weight={self.weight}>"
