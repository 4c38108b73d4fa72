"""Tests for external record normalization and catalog sync.

Run with: pytest tests/test_adapters.py -v
"""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from fakes import InMemoryCatalogStore
from portal.domain.errors import StorageUnavailableError
from portal.services.catalog_sync import CatalogSyncService, JsonFileCatalogSource
from portal.stores.adapters import (
    format_duration,
    product_from_record,
    read_log_from_record,
)


def catalog_record(**fields):
    base = {
        "Destino": ["Atacama"],
        "Serviço": "Valle de la Luna",
        "Categoria do Serviço": "Regular",
        "VER26 ADU": 450,
        "VER26 CHD": "R$ 1.234,50",
        "VER26 INF": "",
        "INV26 ADU": "380.5",
        "INV26 CHD": "abc",
    }
    base.update(fields)
    return {"id": "recAAAAAAAAAAAAAA", "fields": base}


class TestProductFromRecord:
    def test_maps_names_and_unwraps_linked_values(self):
        product = product_from_record(catalog_record())

        assert product.id == "recAAAAAAAAAAAAAA"
        assert product.destination == "Atacama"
        assert product.name == "Valle de la Luna"
        assert product.category == "Regular"

    def test_price_cells_are_coerced(self):
        product = product_from_record(catalog_record())

        assert product.summer.adult.amount == Decimal("450.00")
        assert product.summer.child.amount == Decimal("1234.50")
        assert product.summer.infant.amount == 0
        assert product.winter.adult.amount == Decimal("380.50")
        assert product.winter.child.amount == 0
        assert product.winter.infant.amount == 0

    def test_negative_price_counts_as_zero(self):
        product = product_from_record(catalog_record(**{"VER26 ADU": -10}))
        assert product.summer.adult.amount == 0

    def test_operator_uses_first_present_spelling(self):
        product = product_from_record(
            catalog_record(**{"Operador Nome": "", "OPERADOR": ["Andes Tours"], "Fornecedor": "Other"})
        )
        assert product.operator == "Andes Tours"

    def test_boolean_status(self):
        assert product_from_record(catalog_record(Status=True)).status == "Ativo"
        assert product_from_record(catalog_record(Status=False)).status == "Inativo"

    def test_lists_and_times(self):
        product = product_from_record(
            catalog_record(
                **{
                    "Dias elegíveis": "Seg, Ter , ,Qua",
                    "Tags": ["Noturno", "Astronomia"],
                    "Pickup": 16200,
                    "Mídia do Passeio": [{"url": "https://cdn.example/valle.jpg"}],
                }
            )
        )

        assert product.eligible_days == ("Seg", "Ter", "Qua")
        assert product.tags == ("Noturno", "Astronomia")
        assert product.subcategory == "Noturno, Astronomia"
        assert product.pickup == "04:30"
        assert product.return_time == ""
        assert product.media_url == "https://cdn.example/valle.jpg"

    def test_missing_id_is_rejected(self):
        with pytest.raises(KeyError):
            product_from_record({"fields": {}})


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "00:00"), (3600, "01:00"), (27000, "07:30"), (None, ""), ("7:30", ""), (True, "")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


class TestReadLogFromRecord:
    def test_agency_id_reference(self):
        log = read_log_from_record(
            {
                "fields": {
                    "Usuário": ["recUSER0000000001"],
                    "Aviso": ["recNOTICE00000001"],
                    "Agência": ["recAGENCY00000001"],
                    "Nome": "Ana",
                    "Confirmado_em": "2026-02-01T10:00:00.000Z",
                }
            }
        )

        assert log.user_id == "recUSER0000000001"
        assert log.agency_id == "recAGENCY00000001"
        assert log.agency_name is None
        assert log.confirmed_at == datetime(2026, 2, 1, 10, 0, tzinfo=timezone.utc)

    def test_agency_name_reference(self):
        log = read_log_from_record(
            {
                "createdTime": "2026-02-01T10:00:00",
                "fields": {"User": "u1", "Notice": "n1", "Agency": "Sol Viagens"},
            }
        )

        assert log.agency_id is None
        assert log.agency_name == "Sol Viagens"
        assert log.confirmed_at.tzinfo is timezone.utc

    def test_missing_references(self):
        with pytest.raises(ValueError):
            read_log_from_record({"fields": {"Usuário": "u1"}})


class TestCatalogSync:
    def test_sync_upserts_and_skips_malformed(self, tmp_path):
        export = tmp_path / "tours.json"
        export.write_text(
            json.dumps({"records": [catalog_record(), {"fields": {}}, "junk"]}),
            encoding="utf-8",
        )
        store = InMemoryCatalogStore()

        written = CatalogSyncService(JsonFileCatalogSource(export), store).sync()

        assert written == 1
        assert store.get_product("recAAAAAAAAAAAAAA").name == "Valle de la Luna"

    def test_resync_overwrites_existing_snapshot(self, tmp_path):
        export = tmp_path / "tours.json"
        store = InMemoryCatalogStore()
        for price in (100, 120):
            export.write_text(
                json.dumps([catalog_record(**{"VER26 ADU": price})]), encoding="utf-8"
            )
            CatalogSyncService(JsonFileCatalogSource(export), store).sync()

        assert store.get_product("recAAAAAAAAAAAAAA").summer.adult.amount == Decimal("120.00")

    def test_unreadable_export(self, tmp_path):
        source = JsonFileCatalogSource(tmp_path / "missing.json")
        with pytest.raises(StorageUnavailableError):
            source.fetch_records()
