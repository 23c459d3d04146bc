# Obrador - Timesheet Model

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Boolean, Integer, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Timesheet(Base):
    """
    One submitted shift.
    
    Stored as a flat document: the owner's identity is copied in at write
    time, and every derived field (start_minutes, duration_minutes,
    night_minutes, holiday_minutes, search_text) is recomputed together
    on each write by the entry composer. Nothing writes them directly.
    
    Dates and clock times are kept as strings ("YYYY-MM-DD", "HH:MM");
    string order on date is calendar order.
    
    Deletion is a hard delete; the movements table keeps the trail.
    """
    
    __tablename__ = "timesheets"
    
    # Common query pattern: one user's entries in a date range
    __table_args__ = (
        Index("ix_timesheets_user_date", "user_id", "date"),
        Index("ix_timesheets_date_start", "date", "start_minutes"),
    )
    
    timesheet_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    
    # Owner
    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True
    )
    
    username: Mapped[str] = mapped_column(
        String(40),
        nullable=False
    )
    
    user_display_name: Mapped[str] = mapped_column(
        String(80),
        nullable=False
    )
    
    # Business day of the shift
    date: Mapped[str] = mapped_column(
        String(10),
        nullable=False
    )
    
    start_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False
    )
    
    # May be earlier than start_time: the shift crosses midnight
    end_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False
    )
    
    start_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )
    
    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )
    
    night_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )
    
    is_holiday: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False
    )
    
    holiday_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )
    
    # Classification
    client: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default=""
    )
    
    task: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default=""
    )
    
    work_order: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default=""
    )
    
    search_text: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
        default=""
    )
    
    # Audit fields
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True
    )
    
    created_by: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True
    )
    
    created_by_name: Mapped[Optional[str]] = mapped_column(
        String(80),
        nullable=True
    )
    
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True
    )
    
    updated_by: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True
    )
    
    updated_by_name: Mapped[Optional[str]] = mapped_column(
        String(80),
        nullable=True
    )
    
    def __repr__(self) -> str:
        holiday = " [FERIADO]" if self.is_holiday else ""
        return (
            f"<Timesheet {self.timesheet_id} {self.username} {self.date} "
            f"{self.start_time}-{self.end_time}{holiday}>"
        )
