from sqlalchemy import JSON, TIMESTAMP, Column, Integer, String
from sqlalchemy.sql import func

from .database import Base


class PaymentOrder(Base):
    __tablename__ = "payment_orders"
    id = Column(Integer, primary_key=True, index=True)
    order_sn = Column(String, unique=True, index=True)
    amount = Column(Integer)  # in minor units
    client_ip = Column(String, nullable=True)

    # Status: CREATED -> PAID
    status = Column(String, default="CREATED")
    payment_url = Column(String, nullable=True)
    gateway_response = Column(JSON, nullable=True)
    last_notification = Column(JSON, nullable=True)  # nullable until the gateway calls back

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
