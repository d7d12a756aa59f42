import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bot_impo.errors import RulesConfigError
from bot_impo.models import ConfidenceLevel, SpecialTaxRule, TariffSuggestion, TaxCategory
from bot_impo.rules import (
    find_additional_documents,
    find_special_tax_rule,
    has_trade_agreement,
    load_rule_tables,
)
from bot_impo.rules.loader import parse_rule_tables, validate_prefix_order


def hs(code: str) -> list[TariffSuggestion]:
    return [TariffSuggestion(code=code, description="", confidence=ConfidenceLevel.HIGH)]


def minimal_data(**overrides):
    data = {
        "trade_agreement_countries": ["México"],
        "special_tax_rules": [
            {
                "sub_category": "Pirotecnia",
                "category": "Pirotecnia",
                "rate": 0.5,
                "rate_label": "50%",
                "tariff_prefixes": ["3604"],
            }
        ],
        "certification_rules": [
            {
                "organism": "DGMN",
                "category": "Armas y Explosivos",
                "document": "Permiso DGMN",
                "tariff_chapters": ["93"],
                "description": "Armas",
            }
        ],
    }
    data.update(overrides)
    return data


def test_bundled_tables_shape():
    tables = load_rule_tables()
    assert len(tables.special_tax_rules) == 17
    assert len(tables.certification_rules) == 10
    assert len(tables.trade_agreement_countries) == 25
    assert "China" not in tables.trade_agreement_countries
    assert "China" in tables.countries
    assert [c.catalog.name for c in tables.catalog_rules][0].endswith("Hogar")
    assert load_rule_tables() is tables


def test_bundled_special_tax_order():
    rules = load_rule_tables().special_tax_rules
    names = [r.sub_category for r in rules]
    assert names[:4] == ["Jet ski", "Motores recreativos", "Tabaco elaborado", "Tabaco puro"]
    assert names[-1] == "Vehículos nuevos"
    assert names.index("Tabaco elaborado") < names.index("Tabaco")
    assert all(isinstance(r.category, TaxCategory) for r in rules)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("8903.92.00", "Jet ski"),
        ("8903.10", "Yates"),
        ("8407.21", "Motores recreativos"),
        ("2402.20.00", "Tabaco elaborado"),
        ("2402.10", "Tabaco puro"),
        ("2402.90", "Tabaco"),
        ("2403.11", "Tabaco"),
        ("2204.21", "Cervezas y Vinos"),
        ("7113.19", "Joyas"),
        ("9102.11", "Relojes de lujo"),
        ("8703.23", "Vehículos nuevos"),
    ],
)
def test_special_tax_first_match(code, expected):
    rule = find_special_tax_rule(load_rule_tables().special_tax_rules, hs(code))
    assert rule is not None
    assert rule.sub_category == expected


@pytest.mark.parametrize("code", ["6402.99", "8517.12", "2201.10"])
def test_special_tax_no_match(code):
    assert find_special_tax_rule(load_rule_tables().special_tax_rules, hs(code)) is None


def test_resolvers_without_suggestions():
    tables = load_rule_tables()
    assert find_special_tax_rule(tables.special_tax_rules, []) is None
    assert find_special_tax_rule(tables.special_tax_rules, None) is None
    assert find_additional_documents(tables.certification_rules, []) == []


@pytest.mark.parametrize(
    "code, organisms",
    [
        ("8517.12", ["SUBTEL", "SEC"]),
        ("9018.90", ["ISP", "SUBTEL"]),
        ("0805.10", ["SAG"]),
        ("4415.20", ["SAG"]),
        ("3304.99", ["ISP"]),
        ("2106.90", ["SEREMI de Salud"]),
        ("0306.17", ["SERNAPESCA"]),
        ("9303.20", ["DGMN"]),
        ("2933.39", ["ANAM"]),
        ("6402.99", []),
    ],
)
def test_documents_by_chapter(code, organisms):
    docs = find_additional_documents(load_rule_tables().certification_rules, hs(code))
    assert [d.organism for d in docs] == organisms


def test_documents_use_only_top_suggestion():
    suggestions = hs("6402.99") + hs("8517.12")
    assert find_additional_documents(load_rule_tables().certification_rules, suggestions) == []


def test_trade_agreement_lookup_is_exact():
    countries = load_rule_tables().trade_agreement_countries
    assert has_trade_agreement(countries, "Estados Unidos")
    assert not has_trade_agreement(countries, "estados unidos")
    assert not has_trade_agreement(countries, "China")
    assert not has_trade_agreement(countries, "")


def rule(name, *prefixes, rate=0.15):
    return SpecialTaxRule(
        sub_category=name,
        category=TaxCategory.LUXURY_GOODS,
        rate=rate,
        rate_label=f"{rate * 100:g}%",
        tariff_prefixes=tuple(prefixes),
    )


def test_validate_prefix_order_accepts_specific_first():
    validate_prefix_order([rule("Jet ski", "8903.92"), rule("Yates", "8903")])


def test_validate_prefix_order_rejects_shadowed_prefix():
    with pytest.raises(RulesConfigError) as exc:
        validate_prefix_order([rule("Yates", "8903"), rule("Jet ski", "8903.92")])
    assert "8903.92" in str(exc.value)


def test_parse_minimal_tables():
    tables = parse_rule_tables(minimal_data())
    assert tables.special_tax_rules[0].rate == 0.5
    assert tables.special_tax_rules[0].tariff_prefixes == ("3604",)
    assert tables.certification_rules[0].tariff_chapters == ("93",)
    assert tables.countries == ("México",)
    assert tables.catalog_rules == ()


@pytest.mark.parametrize(
    "field, value",
    [
        ("category", "Electrónica"),
        ("rate", -0.1),
        ("rate", "alta"),
        ("tariff_prefixes", []),
        ("tariff_prefixes", ["36-04"]),
    ],
)
def test_invalid_special_tax_rule(field, value):
    data = minimal_data()
    data["special_tax_rules"][0][field] = value
    with pytest.raises(RulesConfigError):
        parse_rule_tables(data)


@pytest.mark.parametrize("chapters", [["9"], ["930"], []])
def test_invalid_certification_chapters(chapters):
    data = minimal_data()
    data["certification_rules"][0]["tariff_chapters"] = chapters
    with pytest.raises(RulesConfigError):
        parse_rule_tables(data)


def test_missing_section_is_fatal():
    data = minimal_data()
    del data["certification_rules"]
    with pytest.raises(RulesConfigError):
        parse_rule_tables(data)


def test_load_rule_tables_from_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(
        """
trade_agreement_countries: ["Perú"]
special_tax_rules:
  - sub_category: "Perlas"
    category: "Artículos de lujo"
    rate: 0.15
    rate_label: "15%"
    tariff_prefixes: ["7101"]
certification_rules:
  - organism: "ANAM"
    category: "Químicos Controlados"
    document: "Permiso"
    tariff_chapters: ["28"]
    description: "Químicos"
""",
        encoding="utf-8",
    )
    tables = load_rule_tables(str(path))
    assert tables.trade_agreement_countries == frozenset({"Perú"})
    assert tables.special_tax_rules[0].sub_category == "Perlas"


def test_load_rule_tables_bad_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("special_tax_rules: [\n", encoding="utf-8")
    with pytest.raises(RulesConfigError):
        load_rule_tables(str(path))


def test_load_rule_tables_missing_file(tmp_path):
    with pytest.raises(RulesConfigError):
        load_rule_tables(str(tmp_path / "missing.yaml"))
