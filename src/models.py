from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Boolean, Integer, String, Text, DateTime, func

from src.database import Base
from src.intelipost.schemas import IntelipostConfig


class CarrierSettingsModel(Base):
    __tablename__ = 'carrier_settings'

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        nullable=False
    )

    service_name: Mapped[str] = mapped_column(
        String,
        unique=True,
        nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False
    )

    origin_zip_code: Mapped[str] = mapped_column(
        String(16),
        nullable=True
    )

    weight_type: Mapped[str] = mapped_column(
        String(8),
        default='kg',
        nullable=False
    )

    # Encrypted with src.encryption
    account: Mapped[str] = mapped_column(
        Text,
        nullable=True
    )

    password: Mapped[str] = mapped_column(
        Text,
        nullable=True
    )

    api_key: Mapped[str] = mapped_column(
        Text,
        nullable=True
    )

    token: Mapped[str] = mapped_column(
        Text,
        nullable=True
    )

    name: Mapped[str] = mapped_column(
        String(64),
        default='Intelipost',
        nullable=False
    )

    title: Mapped[str] = mapped_column(
        String(64),
        default='E-Sprinter',
        nullable=False
    )

    notify_missing_dimensions: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False
    )

    created_at = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    updated_at = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    def to_config(self) -> IntelipostConfig:
        return IntelipostConfig(
            active=bool(self.is_active),
            origin_zip_code=self.origin_zip_code or '',
            weight_type=self.weight_type or 'kg',
            account=self.account,
            password=self.password,
            api_key=self.api_key,
            token=self.token,
            name=self.name or 'Intelipost',
            title=self.title or 'E-Sprinter',
            notify_missing_dimensions=bool(self.notify_missing_dimensions),
        )

class AdminNotificationModel(Base):
    __tablename__ = 'admin_notifications'

    id = mapped_column(
        Integer,
        primary_key=True,
        index=True
    )

    severity = mapped_column(
        String(16),
        nullable=False
    )

    title = mapped_column(
        String(255),
        nullable=False
    )

    message = mapped_column(
        Text,
        nullable=False
    )

    is_read = mapped_column(
        Boolean,
        default=False,
        nullable=False
    )

    created_at = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )
