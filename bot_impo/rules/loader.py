# bot_impo/rules/loader.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Sequence, Tuple

import yaml

from bot_impo.errors import RulesConfigError
from bot_impo.models import Catalog, CertificationRule, SpecialTaxRule, TaxCategory

logger = logging.getLogger(__name__)

DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "rules.yaml"

_PREFIX_RE = re.compile(r"^\d{2,4}(\.\d{1,4})*$")
_CHAPTER_RE = re.compile(r"^\d{2}$")


@dataclass(frozen=True)
class CatalogRule:
    catalog: Catalog
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class RuleTables:
    special_tax_rules: Tuple[SpecialTaxRule, ...]
    certification_rules: Tuple[CertificationRule, ...]
    trade_agreement_countries: FrozenSet[str]
    countries: Tuple[str, ...]
    catalog_rules: Tuple[CatalogRule, ...]


def _require(raw: Dict[str, Any], key: str, where: str) -> Any:
    if key not in raw or raw[key] is None:
        raise RulesConfigError(f"{where}: falta el campo '{key}'")
    return raw[key]


def _str_list(value: Any, where: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise RulesConfigError(f"{where}: se esperaba una lista no vacía")
    return tuple(str(v).strip() for v in value)


def _parse_special_tax_rule(raw: Dict[str, Any], index: int) -> SpecialTaxRule:
    where = f"special_tax_rules[{index}]"
    try:
        category = TaxCategory(_require(raw, "category", where))
    except ValueError as exc:
        raise RulesConfigError(f"{where}: categoría desconocida ({exc})") from exc
    try:
        rate = float(_require(raw, "rate", where))
    except (TypeError, ValueError) as exc:
        raise RulesConfigError(f"{where}: tasa inválida") from exc
    if not 0 <= rate <= 1:
        raise RulesConfigError(f"{where}: la tasa debe estar entre 0 y 1")
    prefixes = _str_list(_require(raw, "tariff_prefixes", where), where)
    for prefix in prefixes:
        if not _PREFIX_RE.match(prefix):
            raise RulesConfigError(f"{where}: prefijo arancelario inválido '{prefix}'")
    return SpecialTaxRule(
        sub_category=str(_require(raw, "sub_category", where)),
        category=category,
        rate=rate,
        rate_label=str(_require(raw, "rate_label", where)),
        tariff_prefixes=prefixes,
        warning=raw.get("warning") or None,
    )


def _parse_certification_rule(raw: Dict[str, Any], index: int) -> CertificationRule:
    where = f"certification_rules[{index}]"
    chapters = _str_list(_require(raw, "tariff_chapters", where), where)
    for chapter in chapters:
        if not _CHAPTER_RE.match(chapter):
            raise RulesConfigError(f"{where}: capítulo inválido '{chapter}'")
    return CertificationRule(
        organism=str(_require(raw, "organism", where)),
        category=str(_require(raw, "category", where)),
        document=str(_require(raw, "document", where)),
        tariff_chapters=chapters,
        description=str(_require(raw, "description", where)),
    )


def _parse_catalog_rule(raw: Dict[str, Any], index: int) -> CatalogRule:
    where = f"catalogs[{index}]"
    catalog = Catalog(
        name=str(_require(raw, "name", where)),
        url=str(_require(raw, "url", where)),
        price=int(_require(raw, "price", where)),
    )
    keywords = tuple(k.lower() for k in _str_list(_require(raw, "keywords", where), where))
    return CatalogRule(catalog=catalog, keywords=keywords)


def validate_prefix_order(rules: Sequence[SpecialTaxRule]) -> None:
    """Fail if a prefix can never match because an earlier rule shadows it.

    Rules are matched first-to-last, so ``2402.20`` listed after a rule
    holding ``2402`` would be unreachable.
    """
    seen: List[Tuple[str, SpecialTaxRule]] = []
    for rule in rules:
        for prefix in rule.tariff_prefixes:
            for earlier_prefix, earlier in seen:
                if prefix.startswith(earlier_prefix):
                    raise RulesConfigError(
                        f"El prefijo '{prefix}' de '{rule.sub_category}' queda oculto "
                        f"por '{earlier_prefix}' de '{earlier.sub_category}'"
                    )
        seen.extend((prefix, rule) for prefix in rule.tariff_prefixes)


def parse_rule_tables(data: Dict[str, Any]) -> RuleTables:
    if not isinstance(data, dict):
        raise RulesConfigError("Los datos de reglas deben ser un mapeo")

    special = tuple(
        _parse_special_tax_rule(raw, i)
        for i, raw in enumerate(_require(data, "special_tax_rules", "rules"))
    )
    validate_prefix_order(special)
    certifications = tuple(
        _parse_certification_rule(raw, i)
        for i, raw in enumerate(_require(data, "certification_rules", "rules"))
    )
    tlc = frozenset(_str_list(_require(data, "trade_agreement_countries", "rules"), "rules"))
    countries = _str_list(data.get("countries") or sorted(tlc), "countries")
    catalogs = tuple(
        _parse_catalog_rule(raw, i) for i, raw in enumerate(data.get("catalogs") or [])
    )
    return RuleTables(
        special_tax_rules=special,
        certification_rules=certifications,
        trade_agreement_countries=tlc,
        countries=countries,
        catalog_rules=catalogs,
    )


@lru_cache(maxsize=1)
def load_rule_tables(path: str = str(DATA_PATH)) -> RuleTables:
    """Load and validate the rule tables bundled with the package.

    The result is cached; tables are read-only for the process lifetime.
    """
    data_path = Path(path)
    try:
        with data_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Cannot read rule tables from %s: %s", data_path, exc)
        raise RulesConfigError(f"No se pudo leer {data_path.name}") from exc

    tables = parse_rule_tables(data)
    logger.info(
        "Loaded %d special-tax rules, %d certification rules, %d TLC countries",
        len(tables.special_tax_rules),
        len(tables.certification_rules),
        len(tables.trade_agreement_countries),
    )
    return tables


__all__ = [
    "DATA_PATH",
    "CatalogRule",
    "RuleTables",
    "load_rule_tables",
    "parse_rule_tables",
    "validate_prefix_order",
]
