# tests/core/pipeline/test_param_context.py
"""
Testes do ParamContext (parâmetros explícitos sobre camadas de defaults).

Os testes asseguram que:
- valores explícitos vencem qualquer camada de defaults, mesmo vazios
- a camada mais interna vence entre defaults
- o contexto é imutável e não compartilha o dict de entrada
- o protocolo Mapping expõe a visão efetiva

Invariantes:
    - `lookup` distingue "ausente" de "presente com None"
    - `is_present` trata "" e None como ausentes
"""

import pytest

try:
    from sift_query.core.pipeline.params import ParamContext, is_blank
except Exception as e:  # noqa: BLE001
    ParamContext = None
    is_blank = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing ParamContext. Implement:\n"
            "- src/sift_query/core/pipeline/params.py (ParamContext, is_blank)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_is_blank():
    _require_imports()
    assert is_blank(None)
    assert is_blank("")
    assert not is_blank(" ")
    assert not is_blank(0)
    assert not is_blank(False)
    assert not is_blank([])


def test_explicit_wins_over_every_layer():
    """
    Verifica que o valor explícito vence todas as camadas de defaults.

    Invariantes:
        - Explícito "" ainda é explícito (não cai para o default)
        - Chaves só definidas em defaults continuam visíveis
    """
    _require_imports()
    ctx = ParamContext(explicit={"foo": "", "bar": "explicit"})
    ctx = ctx.push_layer({"foo": "outer", "bar": "outer", "baz": "outer"})
    ctx = ctx.push_layer({"baz": "inner"})

    assert ctx.lookup("foo") == (True, "")
    assert ctx["bar"] == "explicit"
    assert ctx["baz"] == "inner"


def test_innermost_layer_wins_among_defaults():
    _require_imports()
    ctx = ParamContext().push_layer({"level": 1}).push_layer({"level": 2}).push_layer({"level": 3})
    assert ctx["level"] == 3
    assert len(ctx.layers) == 3


def test_lookup_distinguishes_missing_from_none():
    _require_imports()
    ctx = ParamContext(explicit={"foo": None})
    assert ctx.lookup("foo") == (True, None)
    assert ctx.lookup("bar") == (False, None)
    assert "foo" in ctx
    assert "bar" not in ctx
    assert not ctx.is_present("foo")
    assert not ctx.is_present("bar")


def test_is_present_ignores_blank_values():
    _require_imports()
    ctx = ParamContext(explicit={"empty": "", "zero": 0, "flag": False, "name": "x"})
    assert not ctx.is_present("empty")
    assert ctx.is_present("zero")
    assert ctx.is_present("flag")
    assert ctx.is_present("name")


def test_context_does_not_share_input_dict():
    """
    Verifica que mutar o dict original não afeta o contexto.

    Invariantes:
        - `explicit` é uma cópia própria
        - `with_overrides` e `push_layer` devolvem novos contextos
    """
    _require_imports()
    raw = {"foo": 1}
    ctx = ParamContext(explicit=raw)
    raw["foo"] = 2
    raw["bar"] = 3

    assert ctx["foo"] == 1
    assert "bar" not in ctx

    derived = ctx.with_overrides({"foo": 10})
    assert derived["foo"] == 10
    assert ctx["foo"] == 1

    layered = ctx.push_layer({"baz": 1})
    assert "baz" in layered
    assert "baz" not in ctx


def test_with_overrides_keeps_layers():
    _require_imports()
    ctx = ParamContext(explicit={"a": 1}).push_layer({"b": 2})
    out = ctx.with_overrides({"a": 5, "c": 3})
    assert dict(out) == {"a": 5, "c": 3, "b": 2}


def test_mapping_protocol_reports_effective_view():
    _require_imports()
    ctx = ParamContext(explicit={"a": 1}).push_layer({"a": 0, "b": 2}).push_layer({"c": 3})
    assert dict(ctx) == {"a": 1, "b": 2, "c": 3}
    assert len(ctx) == 3
    assert ctx == {"a": 1, "b": 2, "c": 3}
    assert ctx.get("missing", "fallback") == "fallback"
    with pytest.raises(KeyError):
        ctx["missing"]


def test_invalid_inputs_raise_type_error():
    _require_imports()
    with pytest.raises(TypeError):
        ParamContext(explicit=["not", "a", "mapping"])
    with pytest.raises(TypeError):
        ParamContext().push_layer("nope")
