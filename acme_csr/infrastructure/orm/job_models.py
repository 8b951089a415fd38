"""Export and import job ORM Models"""

from sqlalchemy import BigInteger, Column, Integer, String, Text, DateTime, JSON, Uuid
from uuid import uuid4

from ...db.models import Base, TimestampMixin


class ExportJobModel(TimestampMixin, Base):
    __tablename__ = 'export_jobs'

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    organization_id = Column(Uuid, nullable=True)
    resource_type = Column(String(32), nullable=False)
    format = Column(String(16), nullable=False)
    status = Column(String(16), nullable=False, index=True)
    filters = Column(JSON, nullable=False, default=dict)
    progress_percentage = Column(Integer, nullable=False, default=0)
    progress_message = Column(String(255), nullable=True)
    processed_records = Column(Integer, nullable=False, default=0)
    total_records = Column(Integer, nullable=False, default=0)
    file_path = Column(String(512), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True, index=True)


class ImportJobModel(TimestampMixin, Base):
    __tablename__ = 'import_jobs'

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    organization_id = Column(Uuid, nullable=True)
    import_type = Column(String(32), nullable=False)
    file_path = Column(String(512), nullable=False)
    original_filename = Column(String(255), nullable=False)
    status = Column(String(16), nullable=False, index=True)
    options = Column(JSON, nullable=False, default=dict)
    total_records = Column(Integer, nullable=False, default=0)
    processed_records = Column(Integer, nullable=False, default=0)
    successful_records = Column(Integer, nullable=False, default=0)
    failed_records = Column(Integer, nullable=False, default=0)
    skipped_records = Column(Integer, nullable=False, default=0)
    errors = Column(JSON, nullable=False, default=list)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
