# src/sift_query/core/pipeline/conditions.py
"""
Condições de aplicação de steps e sifters.

Uma condição decide, a partir do `ParamContext` efetivo e da instância
da query (o "host"), se um step registrado deve ser aplicado ao scope.

Condições definidas:
    - Always     → sempre satisfeita (step incondicional)
    - KeyPresent → chave presente e não vazia ("" e None contam como ausentes)
    - KeyEquals  → valor efetivo igual ao esperado; chave ausente nunca casa
    - Predicate  → callables `when` devem retornar True e `unless` False

Decisões arquiteturais:
    - Predicados são callables recebendo o host, resolvidos no registro
      (nenhum lookup dinâmico por nome de método)
    - O flag `force` não pertence à condição: é aplicado pelo engine
    - Condições são imutáveis após o registro

Limites explícitos:
    - Não executam ações nem guards
    - Não alteram parâmetros nem scope
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, Tuple, runtime_checkable

from .params import ParamContext, is_blank


HostPredicate = Callable[[Any], Any]


@runtime_checkable
class Condition(Protocol):
    """Contrato mínimo de uma condição de step."""

    def is_satisfied(self, params: ParamContext, host: Any) -> bool:
        ...

    def describe(self) -> str:
        ...


@dataclass(frozen=True)
class Always:
    def is_satisfied(self, params: ParamContext, host: Any) -> bool:
        return True

    def describe(self) -> str:
        return "always"


@dataclass(frozen=True)
class KeyPresent:
    """Satisfeita quando `key` tem valor efetivo não vazio.

    Com `require_truthy=True` (padrão dos sifters) o valor também precisa
    ser verdadeiro: `False` e `0` desligam o sifter.
    """

    key: str
    require_truthy: bool = False

    def is_satisfied(self, params: ParamContext, host: Any) -> bool:
        found, value = params.lookup(self.key)
        if not found or is_blank(value):
            return False
        if self.require_truthy:
            return bool(value)
        return True

    def describe(self) -> str:
        return f"present({self.key})"


@dataclass(frozen=True)
class KeyEquals:
    key: str
    expected: Any

    def is_satisfied(self, params: ParamContext, host: Any) -> bool:
        found, value = params.lookup(self.key)
        return found and value == self.expected

    def describe(self) -> str:
        return f"{self.key} == {self.expected!r}"


@dataclass(frozen=True)
class Predicate:
    """
    Condição customizada baseada em predicados do host.

    Todos os callables de `when` precisam retornar verdadeiro e todos os
    de `unless` precisam retornar falso. Com ambos declarados, o
    resultado é o AND dos dois lados.
    """

    when: Tuple[HostPredicate, ...] = ()
    unless: Tuple[HostPredicate, ...] = ()

    def __post_init__(self) -> None:
        for fn in self.when + self.unless:
            if not callable(fn):
                raise TypeError(f"predicate must be callable (type={type(fn).__name__})")

    def is_satisfied(self, params: ParamContext, host: Any) -> bool:
        if not all(fn(host) for fn in self.when):
            return False
        return not any(fn(host) for fn in self.unless)

    def describe(self) -> str:
        parts = [f"when={_name(fn)}" for fn in self.when]
        parts.extend(f"unless={_name(fn)}" for fn in self.unless)
        return "predicate(" + ", ".join(parts) + ")"


def _name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


def combine(base: Condition, when: Tuple[HostPredicate, ...], unless: Tuple[HostPredicate, ...]) -> Condition:
    """Acrescenta predicados `when`/`unless` a uma condição de chave."""
    if not when and not unless:
        return base
    predicate = Predicate(when=when, unless=unless)
    if isinstance(base, Always):
        return predicate
    return AllOf(conditions=(base, predicate))


@dataclass(frozen=True)
class AllOf:
    conditions: Tuple[Condition, ...]

    def is_satisfied(self, params: ParamContext, host: Any) -> bool:
        return all(c.is_satisfied(params, host) for c in self.conditions)

    def describe(self) -> str:
        return " and ".join(c.describe() for c in self.conditions)
