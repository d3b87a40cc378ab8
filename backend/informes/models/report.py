import uuid
from datetime import datetime, timezone, timedelta
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey
from informes.database import Base

# Horário de Brasília (UTC-3)
BRASILIA_TZ = timezone(timedelta(hours=-3))

def get_brasilia_now():
    return datetime.now(BRASILIA_TZ).replace(tzinfo=None)

def new_id():
    return uuid.uuid4().hex


class ReportButton(Base):
    """Ação de informe configurada para os estandes de um evento"""
    __tablename__ = "report_buttons"

    id = Column(String(32), primary_key=True, default=new_id)
    event_id = Column(String(32), ForeignKey("events.id"), nullable=False, index=True)
    label = Column(String(100), nullable=False)
    question = Column(Text, nullable=False)
    department_id = Column(String(50), nullable=True)  # vazio = ação geral
    kind = Column(JSON, nullable=False)  # {"type": "OPEN_TEXT" | "MULTIPLE_CHOICE" | "YES_NO", ...}
    sort_order = Column(Integer, default=0)


class ReportSubmission(Base):
    __tablename__ = "report_submissions"

    id = Column(String(32), primary_key=True, default=new_id)
    event_id = Column(String(32), ForeignKey("events.id"), nullable=False, index=True)
    booth_code = Column(String(20), nullable=False, index=True)
    staff_name = Column(String(100), nullable=False)
    report_label = Column(String(100), nullable=False)
    response = Column(Text, nullable=False)  # resposta principal + pergunta de acompanhamento
    timestamp = Column(DateTime, default=get_brasilia_now)
