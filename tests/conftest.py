"""Shared fixtures: CSV builders for both source registries."""

from __future__ import annotations

import csv
import io
from collections.abc import Callable

import pytest

from birdcode_map.datasources.banding import REQUIRED_COLUMNS as BANDING_COLUMNS
from birdcode_map.datasources.checklist import REQUIRED_COLUMNS as CHECKLIST_COLUMNS


def checklist_csv(rows: list[dict[str, str]]) -> str:
    """Render checklist rows given as ``category/code/name/common`` dicts."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CHECKLIST_COLUMNS)
    for order, row in enumerate(rows, start=1):
        writer.writerow(
            [
                str(order),
                row.get("category", "species"),
                row.get("code", ""),
                f"avibase-{order:04d}",
                row.get("common", ""),
                row.get("name", ""),
                "Passeriformes",
                "Corvidae (Crows, Jays, and Magpies)",
                "Jays, Magpies, Crows, and Ravens",
                "",
            ]
        )
    return buf.getvalue()


def banding_csv(rows: list[dict[str, str]]) -> str:
    """Render banding rows given as ``sp/alpha4/name/common/spec6`` dicts."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(BANDING_COLUMNS)
    for row in rows:
        writer.writerow(
            [
                row.get("sp", ""),
                row.get("alpha4", ""),
                row.get("common", ""),
                row.get("name", ""),
                row.get("spec6", ""),
            ]
        )
    return buf.getvalue()


@pytest.fixture
def make_checklist_csv() -> Callable[[list[dict[str, str]]], str]:
    return checklist_csv


@pytest.fixture
def make_banding_csv() -> Callable[[list[dict[str, str]]], str]:
    return banding_csv

