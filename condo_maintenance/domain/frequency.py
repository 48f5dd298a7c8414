from __future__ import annotations

import unicodedata
from dataclasses import dataclass

from .enums import RecurrenceKind, SpecialRule

FREQUENCY_LABELS_VERSION = 1

NO_REPEAT_LABEL = "Não se repete"
BUILDING_AGE_RULE_LABEL = (
    "A cada 5 anos para edifícios de até 10 anos de entrega, "
    "A cada 3 anos para edifícios entre 11 a 30 anos de entrega, "
    "A cada 1 ano para edifícios com mais de 30 anos de entrega"
)
VENDOR_LABEL = "Conforme indicação dos fornecedores"
NOT_APPLICABLE_LABEL = "Não aplicável"


@dataclass(frozen=True)
class Frequency:
    kind: RecurrenceKind
    interval: int = 1
    include_saturday: bool = False
    rule: SpecialRule | None = None

    @property
    def is_recurring(self) -> bool:
        return self.kind != RecurrenceKind.NONE


NO_RECURRENCE = Frequency(RecurrenceKind.NONE)
UNRESOLVABLE = Frequency(RecurrenceKind.SPECIAL)

_FREQUENCIES: dict[str, Frequency] = {
    NO_REPEAT_LABEL: NO_RECURRENCE,
    "Todos os dias": Frequency(RecurrenceKind.DAYS, 1),
    "Em dias alternados": Frequency(RecurrenceKind.DAYS, 2),
    "Segunda a sexta": Frequency(RecurrenceKind.BUSINESS_DAYS),
    "Segunda a sábado": Frequency(RecurrenceKind.BUSINESS_DAYS, include_saturday=True),
    "A cada semana": Frequency(RecurrenceKind.DAYS, 7),
    "A cada 15 dias": Frequency(RecurrenceKind.DAYS, 15),
    "A cada 1 mês": Frequency(RecurrenceKind.MONTHS, 1),
    "A cada 2 meses": Frequency(RecurrenceKind.MONTHS, 2),
    "A cada 3 meses": Frequency(RecurrenceKind.MONTHS, 3),
    "A cada 4 meses": Frequency(RecurrenceKind.MONTHS, 4),
    "A cada 5 meses": Frequency(RecurrenceKind.MONTHS, 5),
    "A cada 6 meses": Frequency(RecurrenceKind.MONTHS, 6),
    "A cada 1 ano": Frequency(RecurrenceKind.YEARS, 1),
    "A cada 2 anos": Frequency(RecurrenceKind.YEARS, 2),
    "A cada 3 anos": Frequency(RecurrenceKind.YEARS, 3),
    "A cada 5 anos": Frequency(RecurrenceKind.YEARS, 5),
    "A cada 10 anos": Frequency(RecurrenceKind.YEARS, 10),
    BUILDING_AGE_RULE_LABEL: Frequency(RecurrenceKind.SPECIAL, rule=SpecialRule.BUILDING_AGE),
    VENDOR_LABEL: UNRESOLVABLE,
    NOT_APPLICABLE_LABEL: UNRESOLVABLE,
}

FREQUENCY_LABELS: tuple[str, ...] = tuple(_FREQUENCIES)

_ALIASES = {
    "diaria": "Todos os dias",
    "semanal": "A cada semana",
    "quinzenal": "A cada 15 dias",
    "mensal": "A cada 1 mês",
    "a cada mes": "A cada 1 mês",
    "trimestral": "A cada 3 meses",
    "semestral": "A cada 6 meses",
    "anual": "A cada 1 ano",
    "uma vez": NO_REPEAT_LABEL,
    "sob demanda": NO_REPEAT_LABEL,
}


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def normalize_label(raw: str | None) -> str | None:
    """Map ``raw`` to a canonical label, or None when it is not recognised.

    Blank input means "does not repeat".
    """
    text = (raw or "").strip()
    if not text:
        return NO_REPEAT_LABEL
    if text in _FREQUENCIES:
        return text
    return _ALIASES.get(_fold(text))


def is_known_label(raw: str | None) -> bool:
    return normalize_label(raw) is not None


def parse_frequency(raw: str | Frequency | None) -> Frequency:
    if isinstance(raw, Frequency):
        return raw
    label = normalize_label(raw)
    if label is None:
        return NO_RECURRENCE
    return _FREQUENCIES[label]
