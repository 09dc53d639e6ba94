from __future__ import annotations

import pytest
from pydantic import ValidationError

from capra.builder import SchemaBuilder
from capra.core.errors import GrammarError
from capra.core.schema import DimensionOptions, FilterConfig


def _base() -> SchemaBuilder:
    return SchemaBuilder().set_id("test").set_data_source("TestCube")


def test_basic_info_setters() -> None:
    schema = (
        _base()
        .set_name("Vendas Teknisa")
        .set_version("1.0.0")
        .set_description("Schema de teste")
        .add_dimension("loja")
        .add_measure("valor")
        .build()
    )
    assert schema.id == "test"
    assert schema.name == "Vendas Teknisa"
    assert schema.data_source == "TestCube"
    assert schema.version == "1.0.0"
    assert schema.description == "Schema de teste"


def test_set_data_source_info_explicit() -> None:
    schema = (
        SchemaBuilder()
        .set_data_source_info("TesteTeknisaVendas", "vendas", "Vendas Teknisa")
        .add_dimension("loja")
        .build()
    )
    assert schema.id == "vendas"
    assert schema.name == "Vendas Teknisa"
    assert schema.data_source == "TesteTeknisaVendas"


def test_set_data_source_info_derives_id_and_name() -> None:
    schema = SchemaBuilder().set_data_source_info("Teste Teknisa-Vendas").add_dimension("loja").build()
    assert schema.id == "testeteknisavendas"
    assert schema.name == "Teste Teknisa-Vendas"


def test_dimension_defaults() -> None:
    schema = _base().add_dimension("loja").build()
    dim = schema.dimensions["LOJA"]
    assert dim.name == "loja"
    assert dim.hierarchy == "[loja].[Todos].Children"
    assert dim.dimension == "[loja]"
    assert dim.type == "categorical"


def test_dimension_with_options_mapping_and_overrides() -> None:
    schema = (
        _base()
        .add_dimension(
            "modalidadevenda",
            {"label": "Modalidade", "members": ["SALAO", "DELIVERY"]},
            hierarchy="[modalidadevenda].[Canal].Members",
        )
        .build()
    )
    dim = schema.dimensions["MODALIDADEVENDA"]
    assert dim.label == "Modalidade"
    assert dim.members == ("SALAO", "DELIVERY")
    assert dim.hierarchy == "[modalidadevenda].[Canal].Members"
    assert dim.dimension == "[modalidadevenda]"


def test_dimension_with_options_model_and_explicit_key() -> None:
    schema = _base().add_dimension("filial", DimensionOptions(key="LOJA", label="Loja")).build()
    assert "LOJA" in schema.dimensions
    assert "FILIAL" not in schema.dimensions
    assert schema.dimensions["LOJA"].name == "filial"


def test_time_dimension_forces_type() -> None:
    schema = (
        _base()
        .add_time_dimension(
            "data", type="categorical", parallel_period_hierarchy="[BIMFdata.(Completo)]"
        )
        .build()
    )
    dim = schema.dimensions["DATA"]
    assert dim.type == "time"
    assert dim.parallel_period_hierarchy == "[BIMFdata.(Completo)]"


def test_add_dimensions_bulk() -> None:
    schema = (
        _base()
        .add_dimensions(["loja", ("turno", {"members": ["ALMOCO", "JANTAR"]}), "modalidade"])
        .build()
    )
    assert list(schema.dimensions) == ["LOJA", "TURNO", "MODALIDADE"]
    assert schema.dimensions["TURNO"].members == ("ALMOCO", "JANTAR")


def test_add_dimensions_rejects_malformed_entries() -> None:
    with pytest.raises(TypeError, match="dimension entries"):
        _base().add_dimensions([("loja", {}, "extra")])


def test_readding_dimension_overwrites_in_place() -> None:
    schema = (
        _base()
        .add_dimension("loja", label="Primeira")
        .add_dimension("turno")
        .add_dimension("LOJA", label="Segunda")
        .build()
    )
    assert list(schema.dimensions) == ["LOJA", "TURNO"]
    assert schema.dimensions["LOJA"].label == "Segunda"
    assert schema.dimensions["LOJA"].name == "LOJA"


def test_unknown_dimension_option_fails() -> None:
    with pytest.raises(ValidationError):
        _base().add_dimension("loja", hierarchi="[loja]")


def test_blank_dimension_name_fails() -> None:
    with pytest.raises(GrammarError):
        _base().add_dimension("  ")


def test_measure_defaults() -> None:
    schema = _base().add_measure("valorLiquido").build()
    measure = schema.measures["VALOR_LIQUIDO"]
    assert measure.name == "valorLiquido"
    assert measure.mdx == "[Measures].[valorliquido]"
    assert measure.format is None


def test_measure_with_options() -> None:
    schema = (
        _base()
        .add_measure(
            "valorLiquido",
            {"label": "Faturamento", "format": "currency", "decimals": 2},
            mdx_name="valorliquidoitem",
        )
        .build()
    )
    measure = schema.measures["VALOR_LIQUIDO"]
    assert measure.label == "Faturamento"
    assert measure.format == "currency"
    assert measure.decimals == 2
    assert measure.mdx == "[Measures].[valorliquidoitem]"


def test_measure_explicit_mdx_wins() -> None:
    schema = _base().add_measure("ticket", mdx="[Measures].[ticketmedio]", mdx_name="ignored").build()
    assert schema.measures["TICKET"].mdx == "[Measures].[ticketmedio]"


def test_add_measures_bulk_and_overwrite() -> None:
    schema = _base().add_measures(["valorLiquido", ("desconto", {"format": "currency"})]).build()
    assert list(schema.measures) == ["VALOR_LIQUIDO", "DESCONTO"]
    assert schema.measures["DESCONTO"].format == "currency"
    schema = _base().add_measures(["valorLiquido", ("valorLiquido", {"label": "B"})]).build()
    assert len(schema.measures) == 1
    assert schema.measures["VALOR_LIQUIDO"].label == "B"


def test_categories() -> None:
    schema = (
        _base()
        .add_category("DELIVERY", "Delivery", "#F97316", icon="truck", order=1)
        .add_categories(
            [
                ("SALAO", "Salão", "#3B82F6"),
                ("BALCAO", "Balcão", "#10B981", {"order": 3}),
            ]
        )
        .build()
    )
    assert list(schema.categories) == ["DELIVERY", "SALAO", "BALCAO"]
    assert schema.categories["DELIVERY"].icon == "truck"
    assert schema.categories["SALAO"].label == "Salão"
    assert schema.categories["BALCAO"].order == 3


def test_filter_configs_and_governance() -> None:
    schema = (
        _base()
        .add_filter_config("kpiGeral", {"accepts": ["data", "loja", "turno"]})
        .add_filter_config(
            "kpiDelivery",
            FilterConfig(fixed={"modalidade": "[DELIVERY]"}, accepts=("data", "loja")),
        )
        .set_governance_filters(["data"])
        .build()
    )
    assert schema.filter_configs["kpiGeral"].accepts == ("data", "loja", "turno")
    assert schema.filter_configs["kpiDelivery"].fixed == {"modalidade": "[DELIVERY]"}
    assert schema.governance_filters == ("data",)


def test_governance_filters_default() -> None:
    schema = _base().add_dimension("loja").build()
    assert schema.governance_filters == ("data", "loja")


def test_parallel_period_explicit() -> None:
    schema = (
        _base()
        .set_parallel_period("[BIMFdata.(Completo)]", {"Dia": {"level": "Dia", "offset": 7}})
        .build()
    )
    assert schema.parallel_period is not None
    assert schema.parallel_period.hierarchy == "[BIMFdata.(Completo)]"
    assert schema.parallel_period.levels["Dia"].offset == 7


def test_default_parallel_period() -> None:
    schema = _base().set_default_parallel_period("datarefvenda").build()
    pp = schema.parallel_period
    assert pp is not None
    assert pp.hierarchy == "[BIMFdatarefvenda.(Completo)]"
    assert pp.levels["Dia"].offset == 7
    assert pp.levels["Mes"].offset == 1
    assert pp.levels["Ano"].offset == 1
    assert pp.levels["Semana"].level == "Semana"


def test_default_parallel_period_uses_conventional_field() -> None:
    schema = _base().set_default_parallel_period().build()
    assert schema.parallel_period is not None
    assert schema.parallel_period.hierarchy == "[BIMFdatarefvenda.(Completo)]"


def test_set_meta_merges() -> None:
    schema = _base().set_meta({"owner": "bi"}).set_meta({"tier": 1}).build()
    assert schema.meta == {"owner": "bi", "tier": 1}


def test_governance_filters_reject_bare_string() -> None:
    with pytest.raises(TypeError, match="governance filters"):
        _base().set_governance_filters("data")
