# tests/query/test_defaults.py
"""
Testes de camadas de defaults.

Cenários:
- default da query preenche parâmetro ausente
- valor explícito sobrescreve o default, inclusive quando vazio
- defaults declarados em sifters só valem dentro deles
- três níveis: o default mais interno vence entre defaults e o
  explícito vence todos
- defaults fixos (`defaults({...})`) e vindos de arquivo (`load_config`)
- factories de defaults são avaliadas a cada resolução
"""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from sift_query import (
    InvalidDeclarationError,
    Query,
    defaults,
    load_config,
    query,
    query_by,
    sift_by,
    sifter,
    subject,
    to_mapping,
)


class NamespaceQuery(Query):
    @subject
    def base(self):
        return SimpleNamespace()


def _resolve(klass, **params):
    return to_mapping(klass(params=params).resolve())


class DefaultsQuery(NamespaceQuery):
    @defaults
    def base_defaults(self):
        return {"foo": "foo"}

    @query_by("foo")
    def by_foo(self, scope, value):
        scope.foo = value
        return scope


def test_default_fills_missing_param():
    assert _resolve(DefaultsQuery) == {"foo": "foo"}


def test_explicit_param_overrides_default():
    assert _resolve(DefaultsQuery, foo="bar") == {"foo": "bar"}


def test_explicit_empty_value_overrides_default():
    """Um "" explícito vence o default e desliga o step de presença."""
    assert _resolve(DefaultsQuery, foo="") == {}


class SifterDefaultsQuery(NamespaceQuery):
    @defaults
    def base_defaults(self):
        return {"foo": "foo"}

    @sifter("bar")
    class BarSifter:
        @defaults
        def sifter_defaults(self):
            return {"baz": "baz"}

        @query_by(foo="foo")
        def by_foo(self, scope, foo):
            scope.baz = self.params["baz"]
            return scope

    @query()
    def outside(self, scope):
        scope.baz_outside = self.params.get("baz")
        return scope


def test_sifter_defaults_are_scoped_to_the_sifter():
    assert _resolve(SifterDefaultsQuery, bar=True) == {"baz": "baz", "baz_outside": None}


class ThreeLevelQuery(NamespaceQuery):
    level_one = defaults({"shared": "query", "only_query": "query"})

    @sift_by("outer")
    class Outer:
        level_two = defaults({"shared": "outer"})

        @query()
        def outer_sees(self, scope):
            scope.outer_shared = self.params["shared"]
            return scope

        @sift_by("inner")
        class Inner:
            level_three = defaults({"shared": "inner", "explicit": "inner"})

            @query()
            def inner_sees(self, scope):
                scope.inner_shared = self.params["shared"]
                scope.inner_only_query = self.params["only_query"]
                scope.inner_explicit = self.params["explicit"]
                return scope


def test_three_level_layering():
    """
    Verifica a precedência entre três camadas de defaults.

    Invariantes:
        - dentro do sifter mais interno, o default mais interno vence
        - chaves só definidas na query continuam visíveis
        - o valor explícito vence todas as camadas
        - ao sair de um sifter, as camadas dele deixam de valer
    """
    out = _resolve(ThreeLevelQuery, outer=True, inner=True, explicit="explicit")
    assert out == {
        "outer_shared": "outer",
        "inner_shared": "inner",
        "inner_only_query": "query",
        "inner_explicit": "explicit",
    }


def test_multiple_default_layers_at_the_same_level():
    class Layered(NamespaceQuery):
        first = defaults({"a": 1, "b": 1})
        second = defaults({"b": 2})

        @query()
        def record(self, scope):
            scope.a = self.params["a"]
            scope.b = self.params["b"]
            return scope

    assert _resolve(Layered) == {"a": 1, "b": 2}


def test_default_factories_run_per_resolution():
    calls = []

    class Counting(NamespaceQuery):
        @defaults
        def counted(self):
            calls.append(self.scope)
            return {"n": len(calls)}

        @query_by("n")
        def by_n(self, scope, n):
            scope.n = n
            return scope

    q = Counting()
    assert to_mapping(q.resolve()) == {"n": 1}
    assert to_mapping(q.resolve()) == {"n": 2}
    assert all(isinstance(s, SimpleNamespace) for s in calls)


def test_defaults_from_config_file(tmp_path: Path, query_settings_defaults_yaml, query_settings_local_yaml):
    defaults_file = tmp_path / "query.defaults.yaml"
    local_file = tmp_path / "query.local.yaml"
    defaults_file.write_text(query_settings_defaults_yaml, encoding="utf-8")
    local_file.write_text(query_settings_local_yaml, encoding="utf-8")

    params = load_config(defaults_path=defaults_file, local_path=local_file)["params"]

    class FromFile(NamespaceQuery):
        file_defaults = defaults(params)

        @query_by("status")
        def by_status(self, scope, status):
            scope.status = status
            return scope

        @query_by("limit")
        def by_limit(self, scope, limit):
            scope.limit = limit
            return scope

    assert _resolve(FromFile) == {"status": "active", "limit": 25}
    assert _resolve(FromFile, limit=5) == {"status": "active", "limit": 5}


def test_defaults_must_be_mappings():
    with pytest.raises(InvalidDeclarationError):
        defaults(["not", "a", "mapping"])

    class BadFactory(NamespaceQuery):
        @defaults
        def broken(self):
            return ["nope"]

    with pytest.raises(InvalidDeclarationError):
        BadFactory().resolve()
