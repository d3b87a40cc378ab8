"""Modelos de evento e empresas"""
from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from informes.database import Base
from informes.models.report import new_id


class OrganizerCompany(Base):
    """Empresa organizadora do evento"""
    __tablename__ = "organizer_companies"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(150), nullable=False)

    events = relationship("Event", back_populates="organizer")


class Event(Base):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(150), nullable=False)
    organizer_company_id = Column(String(32), ForeignKey("organizer_companies.id"), nullable=False)

    organizer = relationship("OrganizerCompany", back_populates="events")
    companies = relationship("ParticipantCompany", back_populates="event")


class ParticipantCompany(Base):
    """Empresa expositora, identificada pelo código do estande"""
    __tablename__ = "participant_companies"

    id = Column(String(32), primary_key=True, default=new_id)
    event_id = Column(String(32), ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    booth_code = Column(String(20), unique=True, nullable=False, index=True)

    event = relationship("Event", back_populates="companies")
