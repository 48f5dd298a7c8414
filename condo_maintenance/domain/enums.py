from __future__ import annotations

from enum import StrEnum


class OccurrenceStatus(StrEnum):
    PENDENTE = "PENDENTE"
    ATRASADO = "ATRASADO"
    EM_ANDAMENTO = "EM_ANDAMENTO"
    PROXIMAS = "PROXIMAS"
    FEITO = "FEITO"
    PULADO = "PULADO"


class DayStatus(StrEnum):
    PROXIMAS = "PROXIMAS"
    EM_ANDAMENTO = "EM_ANDAMENTO"
    PENDENTE = "PENDENTE"
    HISTORICO = "HISTORICO"


class DayCode(StrEnum):
    """Per-day codes used when a day has no history record to report."""

    NAO_ESPERADO = "NAO_ESPERADO"
    SEM_REGISTRO = "SEM_REGISTRO"


class RecurrenceKind(StrEnum):
    NONE = "none"
    DAYS = "days"
    BUSINESS_DAYS = "business_days"
    MONTHS = "months"
    YEARS = "years"
    SPECIAL = "special"


class SpecialRule(StrEnum):
    BUILDING_AGE = "building_age"


class NotificationWhen(StrEnum):
    OVERDUE = "overdue"
    DUE = "due"
    PRE = "pre"
