"""Normalization of external tabular records into canonical domain models.

The external catalog and read-log tables tolerate several spellings for the
same column and wrap linked values in lists. All of that is resolved here so
services only ever see domain models.
"""

import re
from datetime import datetime, timezone
from typing import Any, Mapping
from uuid import UUID

from portal.domain import CatalogProduct, Money, NoticeReadLog, PaxPrices
from portal.domain.value_objects import round_currency, to_decimal

_EXTERNAL_ID = re.compile(r"^rec[A-Za-z0-9]{14}$")


def _first(fields: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        value = fields.get(name)
        if value not in (None, "", []):
            return value
    return None


def _unwrap(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _text(value: Any) -> str:
    value = _unwrap(value)
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return str(value.get("name") or "")
    return str(value).strip()


def _joined(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v).strip() for v in value if v)
    return _text(value)


def _split(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(",")
    return tuple(s for s in (str(item).strip() for item in items) if s)


def _price(value: Any) -> Money:
    """Coerce a price cell into Money; blanks and garbage count as zero."""
    value = _unwrap(value)
    if value is None or value == "":
        return Money.zero()
    if isinstance(value, str):
        cleaned = value.replace("R$", "").strip()
        if "," in cleaned:
            cleaned = cleaned.replace(".", "").replace(",", ".")
        value = cleaned
    try:
        amount = to_decimal(value)
    except ValueError:
        return Money.zero()
    if not amount.is_finite() or amount < 0:
        return Money.zero()
    return Money(round_currency(amount))


def format_duration(seconds: Any) -> str:
    """Render a duration given in seconds as HH:MM."""
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return ""
    seconds = int(seconds)
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}"


def _media_url(value: Any) -> str:
    first = _unwrap(value)
    if isinstance(first, Mapping):
        return str(first.get("url") or "")
    return ""


def product_from_record(record: Mapping[str, Any]) -> CatalogProduct:
    """Build a CatalogProduct from an external catalog row.

    ``record`` has the shape ``{"id": ..., "fields": {...}}``.
    """
    fields = record.get("fields") or {}
    status = fields.get("Status")
    if isinstance(status, bool):
        status = "Ativo" if status else "Inativo"

    return CatalogProduct(
        id=str(record["id"]),
        destination=_text(fields.get("Destino")),
        name=_text(fields.get("Serviço")),
        category=_text(fields.get("Categoria do Serviço")),
        subcategory=_joined(_first(fields, "Tags", "Categoria")),
        operator=_text(
            _first(
                fields,
                "Operador_Nome",
                "Operador Nome",
                "OPERADOR_NOME",
                "Operador (from Operadores)",
                "Operador (from Operador)",
                "OPERADOR",
                "Fornecedor",
            )
        ),
        status=_text(status),
        season_label=_joined(fields.get("Temporada")),
        pickup=format_duration(fields.get("Pickup")),
        return_time=format_duration(fields.get("Retorno")),
        summer=PaxPrices(
            adult=_price(fields.get("VER26 ADU")),
            child=_price(fields.get("VER26 CHD")),
            infant=_price(fields.get("VER26 INF")),
        ),
        winter=PaxPrices(
            adult=_price(fields.get("INV26 ADU")),
            child=_price(fields.get("INV26 CHD")),
            infant=_price(fields.get("INV26 INF")),
        ),
        eligible_days=_split(fields.get("Dias elegíveis")),
        tags=_split(fields.get("Tags")),
        duration=_text(fields.get("Duração")),
        extra_value=_text(fields.get("Valor Extra")),
        extra_fees=_text(_first(fields, "Taxas Extras?", "Taxas Extras")),
        restrictions=_text(fields.get("Restrições")),
        optionals=_text(_first(fields, "Opcionais disponíveis", "Opcionais")),
        variants=_text(fields.get("Variantes")),
        summary=_text(_first(fields, "Resumo do Passeio", "Resumo")),
        observations=_text(fields.get("Observações")),
        what_to_bring=_text(fields.get("O que levar")),
        media_url=_media_url(fields.get("Mídia do Passeio")),
        updated_at=_text(fields.get("Atualizado em")),
    )


def _looks_like_id(value: str) -> bool:
    if _EXTERNAL_ID.match(value):
        return True
    try:
        UUID(value)
    except ValueError:
        return False
    return True


def _parse_timestamp(value: Any) -> datetime:
    value = _unwrap(value)
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def read_log_from_record(record: Mapping[str, Any]) -> NoticeReadLog:
    """Build a NoticeReadLog from an external read-log row.

    The agency column holds either an agency id or an agency name depending
    on how the row was written; it lands in the matching canonical field.
    """
    fields = record.get("fields") or {}
    user_id = _text(_first(fields, "Usuário", "User", "userId"))
    notice_id = _text(_first(fields, "Aviso", "Mural", "Notice", "noticeId"))
    if not user_id or not notice_id:
        raise ValueError("Read log record is missing its user or notice reference")

    agency_ref = _text(_first(fields, "Agência", "Agency", "agencyId"))
    agency_id = agency_ref if agency_ref and _looks_like_id(agency_ref) else None
    agency_name = agency_ref if agency_ref and agency_id is None else None
    if agency_name is None:
        agency_name = _text(_first(fields, "Nome da Agência", "agencyName")) or None

    return NoticeReadLog(
        user_id=user_id,
        notice_id=notice_id,
        confirmed_at=_parse_timestamp(
            _first(fields, "Confirmado_em", "Confirmado em", "confirmedAt")
            or record.get("createdTime")
        ),
        user_name=_text(_first(fields, "Nome", "Name", "userName")),
        agency_id=agency_id,
        agency_name=agency_name,
    )
