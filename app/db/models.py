"""SQLAlchemy models for dispute cases, their documents and verdicts."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base


class CaseStatus(str, enum.Enum):
    uploaded = "uploaded"
    analyzing = "analyzing"
    completed = "completed"
    failed = "failed"


class Case(Base):
    __tablename__ = "cases"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    status: Mapped[CaseStatus] = mapped_column(
        SAEnum(CaseStatus, name="case_status"), nullable=False, default=CaseStatus.uploaded
    )
    error_message: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    documents: Mapped[list["CaseDocument"]] = relationship(
        "CaseDocument",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="CaseDocument.position",
    )
    verdicts: Mapped[list["Verdict"]] = relationship(
        "Verdict",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="Verdict.created_at",
    )


class CaseDocument(Base):
    __tablename__ = "case_documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    case_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)  # application/pdf, text/plain
    party: Mapped[str] = mapped_column(String(100), nullable=False, default="Unknown")
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)

    bucket: Mapped[str] = mapped_column(String(63), nullable=False, default="case-documents")
    object_key: Mapped[str] = mapped_column(String(512), nullable=False)  # "<case_id>/<n>-<filename>"

    raw_text: Mapped[Optional[str]] = mapped_column(Text)
    analysis: Mapped[Optional[dict]] = mapped_column(JSON)  # DocumentAnalysis, camelCase

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    case: Mapped["Case"] = relationship("Case", back_populates="documents")

    __table_args__ = (Index("idx_case_documents_case_position", "case_id", "position"),)


class Verdict(Base):
    __tablename__ = "verdicts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    case_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False
    )
    model_used: Mapped[str] = mapped_column(String(80), nullable=False)
    verdict: Mapped[str] = mapped_column(Text, nullable=False)
    confidence: Mapped[str] = mapped_column(String(255), nullable=False)
    result: Mapped[dict] = mapped_column(JSON, nullable=False)  # full CaseAssessment JSON

    artifact_bucket: Mapped[str] = mapped_column(String(63), nullable=False, default="verdicts")
    artifact_key: Mapped[str] = mapped_column(String(512), nullable=False)  # "<case_id>/<verdict_id>.json"

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    case: Mapped["Case"] = relationship("Case", back_populates="verdicts")

    __table_args__ = (Index("idx_verdicts_case_created", "case_id", "created_at"),)
