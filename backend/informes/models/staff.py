"""Equipe e registro de atividades"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from informes.database import Base
from informes.models.report import get_brasilia_now, new_id


class Staff(Base):
    """Membro da equipe da organizadora"""
    __tablename__ = "staff"

    id = Column(String(32), primary_key=True, default=new_id)
    organizer_company_id = Column(String(32), ForeignKey("organizer_companies.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    personal_code = Column(String(20), unique=True, nullable=False, index=True)  # código pessoal
    department_id = Column(String(50), nullable=True)
    photo_url = Column(String(500), nullable=True)

    activities = relationship("StaffActivity", back_populates="staff")


class StaffActivity(Base):
    """Registro de atividade da equipe"""
    __tablename__ = "staff_activities"

    id = Column(String(32), primary_key=True, default=new_id)
    staff_id = Column(String(32), ForeignKey("staff.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=get_brasilia_now)

    staff = relationship("Staff", back_populates="activities")
