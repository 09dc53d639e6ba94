from __future__ import annotations

from pathlib import Path

from capra.registry import RegistrySettings

ENV_KEYS = ["CAPRA_REGISTRY_ALLOW_OVERWRITE", "CAPRA_REGISTRY_DEFAULT_SCHEMA"]


def _write_toml(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def test_registry_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    # Arrange TOML
    path = _write_toml(
        tmp_path,
        "capra.toml",
        """
        [registry]
        allow_overwrite = false
        default_schema = "financeiro"
        """.strip(),
    )
    # Arrange ENV that should override TOML
    monkeypatch.setenv("CAPRA_REGISTRY_ALLOW_OVERWRITE", "yes")
    monkeypatch.setenv("CAPRA_REGISTRY_DEFAULT_SCHEMA", "vendas")

    s = RegistrySettings.load(path)

    assert s.allow_overwrite is True
    assert s.default_schema == "vendas"


def test_registry_settings_from_toml_when_no_env(tmp_path: Path, monkeypatch) -> None:
    path = _write_toml(
        tmp_path,
        "capra.toml",
        """
        [registry]
        allow_overwrite = true
        default_schema = "financeiro"
        """.strip(),
    )
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)

    s = RegistrySettings.load(path)

    assert s.allow_overwrite is True
    assert s.default_schema == "financeiro"


def test_registry_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    path = _write_toml(
        tmp_path,
        "pyproject.toml",
        """
        [project]
        name = "dashboards"

        [tool.capra.registry]
        default_schema = "vendas"
        """.strip(),
    )
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)

    s = RegistrySettings.load(path)

    assert s.allow_overwrite is False
    assert s.default_schema == "vendas"


def test_registry_settings_top_level_keys(tmp_path: Path) -> None:
    path = _write_toml(tmp_path, "registry.toml", 'allow_overwrite = "on"\n')
    s = RegistrySettings.from_toml(path)
    assert s.allow_overwrite is True
    assert s.default_schema is None


def test_registry_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)

    assert RegistrySettings.load() == RegistrySettings()
    # a missing file falls back to defaults
    assert RegistrySettings.load(tmp_path / "missing.toml") == RegistrySettings()


def test_blank_default_schema_is_none(monkeypatch) -> None:
    monkeypatch.delenv("CAPRA_REGISTRY_DEFAULT_SCHEMA", raising=False)
    s = RegistrySettings._apply_mapping(RegistrySettings(), {"default_schema": "   "})
    assert s.default_schema is None


def test_env_false_token_disables_overwrite(monkeypatch) -> None:
    monkeypatch.setenv("CAPRA_REGISTRY_ALLOW_OVERWRITE", "off")
    s = RegistrySettings.from_env(base=RegistrySettings(allow_overwrite=True))
    assert s.allow_overwrite is False
