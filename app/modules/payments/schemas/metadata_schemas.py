# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/metadata_schemas.py

Payloads de metadata por propósito de pago.

La metadata que llega del cliente es un dict libre; antes de guardarla
en payments.metadata se convierte en uno de estos modelos. Así el
fulfillment nunca recibe una renta sin content_id o con un tipo de
contenido desconocido.

Autor: ReelPass
Fecha: 09/09/2026
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.modules.entitlements.enums import ContentType
from app.modules.payments.enums import PaymentPurpose


class _MetadataBase(BaseModel):
    # Campos extra del cliente (título, póster...) se descartan
    model_config = ConfigDict(extra="ignore", frozen=True)

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class _ContentMetadata(_MetadataBase):
    content_id: str = Field(min_length=1, max_length=128, description="ID del contenido")
    content_type: ContentType = Field(description="movie | season | episode")

    @field_validator("content_id", mode="before")
    @classmethod
    def _coerce_content_id(cls, v: Any) -> Any:
        # Algunos clientes envían IDs numéricos
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class RentalMetadata(_ContentMetadata):
    rental_duration: Optional[int] = Field(
        default=None,
        ge=1,
        le=8760,
        description="Horas de renta; si falta se usa la duración por tipo de contenido",
    )


class PurchaseMetadata(_ContentMetadata):
    pass


class WalletTopupMetadata(_MetadataBase):
    pass


class SubscriptionMetadata(_MetadataBase):
    plan_id: Optional[str] = Field(default=None, max_length=128)


PaymentMetadata = Union[RentalMetadata, PurchaseMetadata, WalletTopupMetadata, SubscriptionMetadata]


def parse_metadata(purpose: PaymentPurpose, raw: Optional[Dict[str, Any]]) -> PaymentMetadata:
    """
    Convierte la metadata cruda al payload del propósito.

    Raises:
        pydantic.ValidationError: si faltan campos o tienen tipos inválidos.
    """
    data = raw or {}
    match purpose:
        case PaymentPurpose.RENTAL:
            return RentalMetadata.model_validate(data)
        case PaymentPurpose.PURCHASE:
            return PurchaseMetadata.model_validate(data)
        case PaymentPurpose.WALLET_TOPUP:
            return WalletTopupMetadata.model_validate(data)
        case PaymentPurpose.SUBSCRIPTION:
            return SubscriptionMetadata.model_validate(data)


__all__ = [
    "RentalMetadata",
    "PurchaseMetadata",
    "WalletTopupMetadata",
    "SubscriptionMetadata",
    "PaymentMetadata",
    "parse_metadata",
]

# Fin del archivo app/modules/payments/schemas/metadata_schemas.py
