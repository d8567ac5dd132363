"""Mapping between raw CSV fields and MarketRecord.

Column layout of the open dataset (``DEINFO_AB_FEIRASLIVRES``)::

    ID, LONG, LAT, SETCENS, AREAP, CODDIST, DISTRITO, CODSUBPREF, SUBPREFE,
    REGIAO05, REGIAO08, NOME_FEIRA, REGISTRO, LOGRADOURO, NUMERO, BAIRRO,
    REFERENCIA

Columns past the 17th are ignored.
"""

import math
import re
from collections.abc import Sequence

from app.features.markets.records import MarketRecord

MIN_COLUMNS = 17


class ParseError(ValueError):
    """A row could not be turned into a MarketRecord."""

    pass


class InsufficientColumnsError(ParseError):
    """The row has fewer columns than a record needs."""

    def __init__(self, received: int) -> None:
        super().__init__(
            f"the number of columns must be {MIN_COLUMNS} or more, received {received}"
        )
        self.received = received


class FieldParseError(ParseError):
    """A numeric column holds something that is not a number."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"could not parse {field} column: {reason}")
        self.field = field


# Numeric columns must be plain ASCII literals; nothing is trimmed or normalized
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_FLOAT_PATTERN = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_SPECIAL_FLOAT_PATTERN = re.compile(r"[+-]?(?:inf|infinity)|nan", re.IGNORECASE)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _int(fields: Sequence[str], index: int, name: str) -> int:
    value = fields[index]
    if not _INT_PATTERN.fullmatch(value):
        raise FieldParseError(name, f"invalid syntax: {value!r}")

    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise FieldParseError(name, f"value out of range: {value!r}")
    return number


def _float(fields: Sequence[str], index: int, name: str) -> float:
    value = fields[index]
    if _SPECIAL_FLOAT_PATTERN.fullmatch(value):
        return float(value)

    if _DECIMAL_FLOAT_PATTERN.fullmatch(value):
        number = float(value)
    elif _HEX_FLOAT_PATTERN.fullmatch(value):
        try:
            number = float.fromhex(value)
        except OverflowError as e:
            raise FieldParseError(name, f"value out of range: {value!r}") from e
    else:
        raise FieldParseError(name, f"invalid syntax: {value!r}")

    if math.isinf(number):
        raise FieldParseError(name, f"value out of range: {value!r}")
    return number


def parse_row(fields: Sequence[str]) -> MarketRecord:
    """Parse one data row.

    Numeric columns are converted in file order and the first failure aborts
    the row. Text columns are kept verbatim.

    Args:
        fields: Raw column values of one CSV row.

    Returns:
        The parsed record.

    Raises:
        InsufficientColumnsError: If the row has fewer than 17 columns.
        FieldParseError: If a numeric column cannot be converted.
    """
    if len(fields) < MIN_COLUMNS:
        raise InsufficientColumnsError(len(fields))

    record_id = _int(fields, 0, "ID")
    longitude = _float(fields, 1, "LONG")
    latitude = _float(fields, 2, "LAT")
    setor_censitario = _int(fields, 3, "SETCENS")
    area_ponderacao = _int(fields, 4, "AREAP")
    codigo_distrito = _int(fields, 5, "CODDIST")
    codigo_subprefeitura = _int(fields, 7, "CODSUBPREF")

    return MarketRecord(
        id=record_id,
        longitude=longitude,
        latitude=latitude,
        setor_censitario=setor_censitario,
        area_ponderacao=area_ponderacao,
        codigo_distrito=codigo_distrito,
        distrito=fields[6],
        codigo_subprefeitura=codigo_subprefeitura,
        subprefeitura=fields[8],
        regiao5=fields[9],
        regiao8=fields[10],
        nome_feira=fields[11],
        registro=fields[12],
        logradouro=fields[13],
        numero=fields[14],
        bairro=fields[15],
        referencia=fields[16],
    )


def record_to_row(record: MarketRecord) -> list[str]:
    """Serialize a record back to the dataset's column order.

    ``parse_row(record_to_row(record)) == record`` holds for every record.
    """
    return [
        str(record.id),
        repr(record.longitude),
        repr(record.latitude),
        str(record.setor_censitario),
        str(record.area_ponderacao),
        str(record.codigo_distrito),
        record.distrito,
        str(record.codigo_subprefeitura),
        record.subprefeitura,
        record.regiao5,
        record.regiao8,
        record.nome_feira,
        record.registro,
        record.logradouro,
        record.numero,
        record.bairro,
        record.referencia,
    ]
