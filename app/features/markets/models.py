"""ORM model for the street market (feira livre) table.

Rows are keyed by the identifier published in the city's open dataset, so
imports insert explicit ids while API-created rows draw from the serial
sequence. Keep the sequence ahead of MAX(id) after every import.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class StreetMarket(Base):
    """Street market table.

    Attributes:
        id: Primary key, supplied by the dataset on import.
        longitude: Longitude as published (scaled integer degrees in the source).
        latitude: Latitude as published.
        setor_censitario: Census sector code.
        area_ponderacao: Weighting area code.
        codigo_distrito: District code.
        distrito: District name.
        codigo_subprefeitura: Subprefecture code.
        subprefeitura: Subprefecture name.
        regiao5: Region in the 5-region division.
        regiao8: Region in the 8-region division.
        nome_feira: Market name.
        registro: Market registration number.
        logradouro: Street name.
        numero: Street number (free text, may be "S/N").
        bairro: Neighbourhood.
        referencia: Reference point.
        created_at: Set by the database on first insert, never overwritten.
        updated_at: Refreshed on every write; upserts and bulk updates set it
            explicitly since they bypass the ORM unit of work.
    """

    __tablename__ = "feira_livre"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    longitude: Mapped[float] = mapped_column(Float)
    latitude: Mapped[float] = mapped_column(Float)
    setor_censitario: Mapped[int] = mapped_column(BigInteger)
    area_ponderacao: Mapped[int] = mapped_column(BigInteger)
    codigo_distrito: Mapped[int] = mapped_column(Integer)
    distrito: Mapped[str] = mapped_column(String(100))
    codigo_subprefeitura: Mapped[int] = mapped_column(Integer)
    subprefeitura: Mapped[str] = mapped_column(String(100))
    regiao5: Mapped[str] = mapped_column(String(20))
    regiao8: Mapped[str] = mapped_column(String(20))
    nome_feira: Mapped[str] = mapped_column(String(100))
    registro: Mapped[str] = mapped_column(String(20))
    logradouro: Mapped[str] = mapped_column(String(200))
    numero: Mapped[str] = mapped_column(String(20))
    bairro: Mapped[str] = mapped_column(String(100))
    referencia: Mapped[str] = mapped_column(String(200))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_feira_livre_distrito", "distrito"),
        Index("ix_feira_livre_regiao5", "regiao5"),
        Index("ix_feira_livre_bairro", "bairro"),
    )
