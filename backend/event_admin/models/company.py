"""Company directory ORM model. Column names follow the shared directory table."""
import uuid
from sqlalchemy import Column, String, Boolean
from event_admin.database import Base


class Company(Base):
    __tablename__ = "directorio_empresas"

    id_establecimiento = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    nombre_establecimiento = Column(String(255), nullable=False)
    rif_compania = Column(String(32), nullable=True)
    email_principal = Column(String(255), nullable=True)
    telefono_principal_1 = Column(String(64), nullable=True)
    nombre_municipio = Column(String(255), nullable=True)
    es_afiliado_ciec = Column(Boolean, nullable=False, default=False)
