from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, DateTime, Float, Integer, BigInteger, Boolean, ForeignKey, UniqueConstraint, Index
from datetime import datetime


class Base(DeclarativeBase):
    pass

class Device(Base):
    __tablename__ = "devices"
    device_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128))
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_seen_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

class APIKey(Base):
    __tablename__ = "api_keys"
    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner: Mapped[str] = mapped_column(String(128))
    revoked: Mapped[bool] = mapped_column(Boolean, default=False)

class Reading(Base):
    """One indoor snapshot: all six pollutants plus comfort metrics."""
    __tablename__ = "readings"
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(String(64), ForeignKey("devices.device_id"))
    measured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    pm25: Mapped[float] = mapped_column(Float)
    pm10: Mapped[float] = mapped_column(Float)
    co: Mapped[float] = mapped_column(Float)
    no2: Mapped[float] = mapped_column(Float)
    so2: Mapped[float] = mapped_column(Float)
    o3: Mapped[float] = mapped_column(Float)

    temperature_c: Mapped[float | None] = mapped_column(Float, nullable=True)
    humidity: Mapped[float | None] = mapped_column(Float, nullable=True)
    pressure_hpa: Mapped[float | None] = mapped_column(Float, nullable=True)

    # derived at ingest time
    aqi: Mapped[int] = mapped_column(Integer)
    level: Mapped[str] = mapped_column(String(16))
    dominant_pollutant: Mapped[str] = mapped_column(String(8))
    alert_flag: Mapped[int] = mapped_column(Integer, default=0)

    api_key: Mapped[str | None] = mapped_column(String(64), ForeignKey("api_keys.key"), nullable=True)
    idempotency_key: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint("device_id", "measured_at", name="uq_reading"),
        Index("idx_readings_device_time", "device_id", "measured_at"),
        Index("idx_readings_alert", "alert_flag", "measured_at"),
    )
