"""Tests for the historical spreadsheet import."""

from __future__ import annotations

import io
import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from apps.bookings.importers import import_bookings, map_nationality, parse_date, parse_guests, parse_money
from apps.bookings.models import Booking
from apps.users.tests.factories import make_accommodation

HEADER = (
    "Mes;Data Check-In;Data check-out;Noites;Guest;Lingua;Motivo viagem;Valor;Imposto Municipal;"
    "Comissao;Taxa bancaria;Valor sem comissoes;Valor Sem IVA;IVA (6%);Plataforma;;;;Observacoes"
)

SPREADSHEET = "\n".join(
    [
        HEADER,
        "Jan;11-Jan-25;14-Jan-25;3;Patricia Soares e mais 7 adultos;Português;Lazer;€ 1.130,00;€ 12,00;"
        "€ 120,00;€ 2,50;€ 1.007,50;€ 950,47;€ 57,03;Airbnb;;;;",
        "Jan;13-Jan-25;15-Jan-25;2;Overlapping Guest;Inglês;Lazer;€ 200,00;;€ 20,00;;;;;Booking;;;;",
        "Fev;1-Fev-25;3-Fev-25;2;Rita + 2 hóspedes;Francês;Trabalho;€ 300,00;;;;;;€ 18,00;Direct;;;;cancelada",
        "Mar;5-Mar-25;8-Mar-25;3;Marc e mais um;frances;Lazer;€ 250,00;;€ 25,00;€ 1,00;;;€ 15,00;Direct;;;;",
        "Abr;1-Abr-25;4-Abr-25;3;No Money;Espanhol;Lazer;-;;;;;;;Direct;;;;",
        ";;;;;;;;;;;;;;;;;;",
        "Total;;;;;;;€ 9.999,00",
    ]
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("11-Jan-25", date(2025, 1, 11)),
        ("3-Fev-24", date(2024, 2, 3)),
        ("28-Dez-2023", date(2023, 12, 28)),
        ("01-Oct-25", date(2025, 10, 1)),
        ("31-Fev-25", None),
        ("11/01/25", None),
        ("11-Foo-25", None),
        ("", None),
    ],
)
def test_parse_date(raw, expected) -> None:
    assert parse_date(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("€ 130,00", Decimal("130.00")),
        ("€ 1.234,56", Decimal("1234.56")),
        ("75", Decimal("75.00")),
        ("-", None),
        ("", None),
        ("n/a", None),
    ],
)
def test_parse_money(raw, expected) -> None:
    assert parse_money(raw) == expected


@pytest.mark.parametrize(
    ("raw", "name", "guests"),
    [
        ("Patricia Soares e mais 7 adultos", "Patricia Soares", 8),
        ("Rita + 5 hóspedes", "Rita", 6),
        ("Ana e mais um", "Ana", 2),
        ("Paulo + adulto", "Paulo", 2),
        ("Katia Balane e mais 4 adultos e 1 criança", "Katia Balane", 6),
        ("Sofia (2 bebés)", "Sofia", 3),
        ("Grupo e mais 40 pessoas", "Grupo", 20),
        ("João", "João", 1),
        ("", "Desconhecido", 1),
    ],
)
def test_parse_guests(raw, name, guests) -> None:
    info = parse_guests(raw)

    assert info.name == name
    assert info.guests == guests


def test_map_nationality() -> None:
    assert map_nationality("Português") == "PT"
    assert map_nationality(" ingles ") == "EN"
    assert map_nationality("francês/belga") == "BE"
    assert map_nationality("Klingon") == "OTHER"
    assert map_nationality("") == "OTHER"


class ImportBookingsTests(TestCase):
    def setUp(self) -> None:
        self.loft = make_accommodation("Test Loft", max_guests=8)

    def test_import_creates_confirmed_bookings(self) -> None:
        report = import_bookings(io.StringIO(SPREADSHEET), self.loft)

        self.assertEqual(report.processed, 2)
        # overlap, cancelled row and the row without a gross value
        self.assertEqual(report.skipped, 3)
        self.assertEqual(len(report.problems), 3)

        bookings = list(Booking.objects.filter(accommodation=self.loft).order_by("check_in"))
        self.assertEqual([b.primary_name for b in bookings], ["Patricia Soares", "Marc"])
        first = bookings[0]
        self.assertEqual(first.status, Booking.Status.CONFIRMED)
        self.assertEqual(first.guests, 8)
        self.assertEqual(first.nationality, "PT")
        self.assertEqual(first.gross_value, Decimal("1130.00"))
        self.assertEqual(first.municipal_tax, Decimal("12.00"))
        self.assertEqual(first.platform, "Airbnb")
        # Recomputed rather than copied from the spreadsheet.
        self.assertEqual(first.value_net_of_commissions, Decimal("1007.50"))
        self.assertEqual(first.value_net_of_vat, Decimal("950.47"))
        self.assertEqual(bookings[1].guests, 2)
        self.assertEqual(bookings[1].nationality, "FR")

    def test_existing_confirmed_stay_is_respected(self) -> None:
        Booking.objects.create(
            accommodation=self.loft,
            check_in=date(2025, 3, 6),
            check_out=date(2025, 3, 7),
            guests=1,
            primary_name="Already There",
            status=Booking.Status.CONFIRMED,
        )

        report = import_bookings(io.StringIO(SPREADSHEET), self.loft)

        self.assertEqual(report.processed, 1)
        self.assertTrue(any("Marc" in problem for problem in report.problems))

    def test_dry_run_saves_nothing(self) -> None:
        report = import_bookings(io.StringIO(SPREADSHEET), self.loft, dry_run=True)

        self.assertEqual(report.processed, 2)
        self.assertFalse(Booking.objects.filter(accommodation=self.loft).exists())


class ImportCommandTests(TestCase):
    def setUp(self) -> None:
        self.loft = make_accommodation("Test Loft", max_guests=8)
        handle = tempfile.NamedTemporaryFile("w", suffix=".csv", delete=False, encoding="utf-8")
        with handle:
            handle.write(SPREADSHEET)
        self.path = handle.name
        self.addCleanup(os.remove, self.path)

    def test_command_reports_summary(self) -> None:
        out = io.StringIO()

        call_command("import_bookings_csv", self.path, accommodation=self.loft.pk, stdout=out)

        output = out.getvalue()
        self.assertIn("Processed: 2, Skipped: 3", output)
        self.assertIn("cancelled", output)
        self.assertEqual(Booking.objects.filter(accommodation=self.loft).count(), 2)

    def test_command_dry_run(self) -> None:
        out = io.StringIO()

        call_command("import_bookings_csv", self.path, accommodation=self.loft.pk, dry_run=True, stdout=out)

        self.assertIn("dry run", out.getvalue())
        self.assertFalse(Booking.objects.filter(accommodation=self.loft).exists())

    def test_unknown_accommodation(self) -> None:
        with self.assertRaises(CommandError):
            call_command("import_bookings_csv", self.path, accommodation=999999, stdout=io.StringIO())
