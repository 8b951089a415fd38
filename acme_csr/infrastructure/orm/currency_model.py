"""Currency ORM Model"""

from sqlalchemy import Column, Integer, Numeric, String, DateTime, Boolean

from ...db.models import Base, TimestampMixin


class CurrencyModel(TimestampMixin, Base):
    __tablename__ = 'currencies'

    code = Column(String(3), primary_key=True)
    name = Column(String(100), nullable=False)
    symbol = Column(String(10), nullable=False)
    flag = Column(String(16), nullable=True)
    decimal_places = Column(Integer, default=2, nullable=False)
    decimal_separator = Column(String(1), default='.', nullable=False)
    thousands_separator = Column(String(1), default=',', nullable=False)
    symbol_position = Column(String(8), default='before', nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    exchange_rate = Column(Numeric(18, 8), default=1, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    rate_updated_at = Column(DateTime, nullable=True)
