"""Parsing and loading of historical booking spreadsheets.

The spreadsheets were kept by hand, one per accommodation, and exported as
semicolon separated CSV with Portuguese headers::

    Mes;Data Check-In;Data check-out;Noites;Guest;Lingua;Motivo viagem;Valor;
    Imposto Municipal;Comissao;Taxa bancaria;Valor sem comissoes;
    Valor Sem IVA;IVA (6%);Plataforma[;...;Observacoes]

Stored net values are ignored; they are recomputed from the inputs.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, TextIO

from django.db import transaction  # type: ignore

from apps.accommodations.models import Accommodation
from shared.domain.exceptions import ConflictError, ValidationError

from . import services
from .domain.financials import round_cents
from .models import Booking

logger = logging.getLogger(__name__)

MIN_COLUMNS = 15
OBSERVATIONS_COLUMN = 18
MAX_GUESTS = 20
UNKNOWN_GUEST = "Desconhecido"
UNKNOWN_NATIONALITY = "OTHER"

MONTHS = {
    "jan": 1, "fev": 2, "feb": 2, "mar": 3, "abr": 4, "apr": 4,
    "mai": 5, "may": 5, "jun": 6, "jul": 7, "ago": 8, "aug": 8,
    "set": 9, "sep": 9, "out": 10, "oct": 10, "nov": 11, "dez": 12, "dec": 12,
}

NATIONALITIES = {
    "portugues": "PT", "português": "PT", "portgues": "PT", "portguês": "PT",
    "frances": "FR", "francês": "FR", "français": "FR",
    "ingles": "EN", "inglês": "EN", "ingl~es": "EN", "inglês/frances": "EN",
    "espanhol": "ES",
    "brazileiro": "BR", "brasileiro": "BR",
    "italiano": "IT",
    "americano": "US",
    "francês/belga": "BE", "francês/inglês": "FR",
}

_AND_MORE = re.compile(r"^(.+?)\s+e\s+mais\s+(\d+)", re.IGNORECASE)
_PLUS = re.compile(r"^(.+?)\s*\+\s*(\d+)\s*(h[óo]spedes?|adultos?|pessoas?)", re.IGNORECASE)
_PLUS_ONE = re.compile(r"^(.+?)\s+(e\s+mais\s+um|e\s+outro|\+\s*adulto|\+\s*1\s*adulto)", re.IGNORECASE)
_CHILDREN = re.compile(r"(\d+)\s*(crian[çc]as?|beb[eé]s?)", re.IGNORECASE)
_TRAILING = re.compile(r"\s*(e\s+mais.*|mais\s+\d+.*|\+.*|\(\d+.*)", re.IGNORECASE)


def parse_date(value: str | None) -> date | None:
    """Parse ``DD-Mon-YY`` (``11-Jan-25``, ``3-Fev-24``). Returns None when unreadable."""

    if not value or not value.strip():
        return None
    parts = value.strip().split("-")
    if len(parts) != 3:
        return None
    day, month_name, year = parts
    month = MONTHS.get(month_name.strip().lower()[:3])
    if month is None:
        logger.warning("Unknown month %r in date %r", month_name, value)
        return None
    try:
        full_year = int(year) + 2000 if len(year.strip()) == 2 else int(year)
        return date(full_year, month, int(day))
    except ValueError:
        return None


def parse_money(value: str | None) -> Decimal | None:
    """Parse European amounts such as ``€ 1.234,56``. Blank and ``-`` give None."""

    if value is None:
        return None
    clean = re.sub(r"[€\s]", "", value)
    if not clean or clean == "-":
        return None
    clean = clean.replace(".", "").replace(",", ".", 1)
    try:
        return round_cents(Decimal(clean))
    except InvalidOperation:
        return None


@dataclass(frozen=True)
class GuestInfo:
    name: str
    guests: int


def parse_guests(value: str | None) -> GuestInfo:
    """Split a free text guest cell into the responsible name and a head count.

    >>> parse_guests("Patricia Soares e mais 7 adultos")
    GuestInfo(name='Patricia Soares', guests=8)
    """

    if not value or not value.strip():
        return GuestInfo(UNKNOWN_GUEST, 1)

    name = value.strip()
    additional = 0

    match = _AND_MORE.match(name)
    if match:
        name = match.group(1).strip()
        additional = int(match.group(2))

    match = _PLUS.match(name)
    if match:
        name = match.group(1).strip()
        additional = int(match.group(2))

    match = _PLUS_ONE.match(name)
    if match:
        name = match.group(1).strip()
        additional = 1

    for child in _CHILDREN.finditer(value):
        additional += int(child.group(1))

    name = _TRAILING.sub("", name, count=1).strip() or UNKNOWN_GUEST
    return GuestInfo(name, min(max(1, 1 + additional), MAX_GUESTS))


def map_nationality(language: str | None) -> str:
    if not language:
        return UNKNOWN_NATIONALITY
    return NATIONALITIES.get(language.strip().lower(), UNKNOWN_NATIONALITY)


@dataclass
class ImportedRow:
    line: int
    check_in: date
    check_out: date
    guests: int
    primary_name: str
    nationality: str
    notes: str
    gross_value: Decimal | None
    municipal_tax: Decimal | None
    commission: Decimal | None
    bank_fee: Decimal | None
    vat: Decimal | None
    platform: str


@dataclass
class ImportReport:
    processed: int = 0
    skipped: int = 0
    created_ids: list[int] = field(default_factory=list)
    problems: list[str] = field(default_factory=list)

    def skip(self, line: int, reason: str) -> None:
        self.skipped += 1
        self.problems.append(f"Line {line}: {reason}")


def read_rows(handle: TextIO) -> Iterable[tuple[int, list[str]]]:
    """Yield ``(line_number, cells)`` for every data line after the header."""

    reader = csv.reader(handle, delimiter=";", quotechar='"')
    for line_number, cells in enumerate(reader, start=1):
        if line_number == 1 or not any(cell.strip() for cell in cells):
            continue
        yield line_number, [cell.strip() for cell in cells]


def is_cancelled(cells: list[str]) -> bool:
    if len(cells) <= OBSERVATIONS_COLUMN:
        return False
    return "cancelada" in cells[OBSERVATIONS_COLUMN].lower()


def parse_row(line: int, cells: list[str]) -> ImportedRow | None:
    """Turn one spreadsheet line into a row, or None for summary and blank lines."""

    if len(cells) < MIN_COLUMNS:
        return None
    (
        _month, raw_check_in, raw_check_out, _nights, guest, language, reason,
        gross, municipal_tax, commission, bank_fee, _net_commissions,
        _net_vat, vat, platform,
    ) = cells[:MIN_COLUMNS]

    check_in = parse_date(raw_check_in)
    check_out = parse_date(raw_check_out)
    if check_in is None or check_out is None:
        return None

    guest_info = parse_guests(guest)
    return ImportedRow(
        line=line,
        check_in=check_in,
        check_out=check_out,
        guests=guest_info.guests,
        primary_name=guest_info.name,
        nationality=map_nationality(language),
        notes=reason,
        gross_value=parse_money(gross),
        municipal_tax=parse_money(municipal_tax),
        commission=parse_money(commission),
        bank_fee=parse_money(bank_fee),
        vat=parse_money(vat),
        platform=platform,
    )


def import_bookings(
    handle: TextIO,
    accommodation: Accommodation,
    *,
    dry_run: bool = False,
) -> ImportReport:
    """Load a spreadsheet export into confirmed bookings of ``accommodation``.

    Every row goes through the normal creation path, so rows overlapping an
    existing confirmed stay, a blocked period or an earlier row of the same
    file are skipped and reported. With ``dry_run`` nothing is kept.
    """

    report = ImportReport()
    with transaction.atomic():
        for line, cells in read_rows(handle):
            if is_cancelled(cells):
                report.skip(line, "cancelled")
                continue
            row = parse_row(line, cells)
            if row is None:
                continue
            try:
                booking = services.create_booking(
                    accommodation=accommodation,
                    check_in=row.check_in,
                    check_out=row.check_out,
                    guests=row.guests,
                    primary_name=row.primary_name,
                    nationality=row.nationality,
                    notes=row.notes,
                    status=Booking.Status.CONFIRMED,
                    gross_value=row.gross_value,
                    municipal_tax=row.municipal_tax,
                    commission=row.commission,
                    bank_fee=row.bank_fee,
                    vat=row.vat,
                    platform=row.platform,
                )
            except (ConflictError, ValidationError) as exc:
                report.skip(
                    line,
                    f"{row.primary_name} {row.check_in} - {row.check_out}: {exc.message}",
                )
                continue
            report.processed += 1
            report.created_ids.append(booking.pk)
        if dry_run:
            transaction.set_rollback(True)

    logger.info(
        "Imported bookings for accommodation %s: processed=%s skipped=%s dry_run=%s",
        accommodation.pk,
        report.processed,
        report.skipped,
        dry_run,
    )
    return report
