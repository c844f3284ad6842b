# tests/core/config/test_merge.py
"""
Testes da política de deep-merge de configuração.

Os testes asseguram que:
- valores escalares são sobrescritos
- dicionários são mesclados de forma recursiva
- listas são sobrescritas integralmente
- None no override substitui o valor base
- conflitos de tipo são rejeitados explicitamente
- objetos de entrada não são mutados

Invariantes:
    - Chaves não sobrescritas são preservadas
    - Nenhum merge parcial é produzido em caso de erro
"""

import pytest

try:
    from sift_query.core.config.errors import ConfigTypeConflictError
    from sift_query.core.config.merge import deep_merge
except Exception as e:  # noqa: BLE001
    deep_merge = None
    ConfigTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config merge modules. Implement:\n"
            "- src/sift_query/core/config/merge.py (deep_merge)\n"
            "- src/sift_query/core/config/errors.py (ConfigTypeConflictError)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_merge_simple_override():
    """
    Verifica o override de escalares sem mutar as entradas.

    Invariantes:
        - `base` e `override` não sofrem mutação
    """
    _require_imports()
    base = {"a": 1, "b": 2}
    override = {"b": 99}
    out = deep_merge(base, override)
    assert out == {"a": 1, "b": 99}
    assert base == {"a": 1, "b": 2}
    assert override == {"b": 99}


def test_merge_nested_dict():
    _require_imports()
    base = {"query": {"raise_on_guard_violation": True, "subject_name": "scope"}}
    override = {"query": {"subject_name": "relation"}}
    out = deep_merge(base, override)
    assert out == {"query": {"raise_on_guard_violation": True, "subject_name": "relation"}}


def test_merge_list_override_total():
    _require_imports()
    base = {"params": {"tags": ["a", "b"]}}
    override = {"params": {"tags": ["c"]}}
    assert deep_merge(base, override) == {"params": {"tags": ["c"]}}


def test_merge_none_replaces_value():
    _require_imports()
    base = {"params": {"limit": 10}}
    assert deep_merge(base, {"params": {"limit": None}}) == {"params": {"limit": None}}
    assert deep_merge({"params": None}, {"params": {"limit": 1}}) == {"params": {"limit": 1}}


def test_merge_does_not_share_nested_objects():
    _require_imports()
    base = {"params": {"tags": ["a"]}}
    out = deep_merge(base, {})
    out["params"]["tags"].append("b")
    assert base == {"params": {"tags": ["a"]}}


@pytest.mark.parametrize(
    "base, override",
    [
        ({"query": {"raise_on_guard_violation": True}}, {"query": "strict"}),
        ({"params": {"limit": 10}}, {"params": {"limit": "ten"}}),
        ({"params": "x"}, {"params": {"limit": 1}}),
    ],
)
def test_merge_type_conflict_raises(base, override):
    _require_imports()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge(base, override)


def test_merge_requires_dict_roots():
    _require_imports()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"a": 1}, ["b"])
