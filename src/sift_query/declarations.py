# src/sift_query/declarations.py
"""
Superfície declarativa do sift-query.

Este módulo define os decorators usados no corpo de uma subclasse de
`Query` para registrar steps, sifters, guards, defaults e a factory do
scope base. A declaração acontece uma única vez, quando a classe é
criada; o resultado é um `QueryTemplate` imutável.

Decorators:
    - @subject                 → factory do scope base `(self) -> scope`
    - @query(...)              → step incondicional ou gateado por predicados
    - @query_by("key")         → step gateado por presença da chave
    - @query_by(key="value")   → step gateado por igualdade de valor
    - @sift_by(...) / @sifter  → sifter; aplicado a uma classe aninhada
                                 cujo corpo contém mais declarações
    - @defaults / defaults({}) → camada de defaults do nível corrente
    - @guard("mensagem")       → guard da query (ou do sifter)

Opções comuns de steps e sifters:
    - when / unless: callable ou sequência de callables `(self) -> bool`
    - position: None, "first", "last" ou índice inteiro
    - force: aplica o nó mesmo com a condição falsa
    - guard: callable `(self[, value]) -> bool` ou `Guard`

A ordem de registro é a ordem do corpo da classe; decorators empilhados
em uma mesma função registram de cima para baixo.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Tuple

from sift_query.core.errors import invalid_declaration
from sift_query.core.exceptions import InvalidDeclarationError
from sift_query.core.pipeline.conditions import Always, Condition, KeyEquals, KeyPresent, combine
from sift_query.core.pipeline.registry import StepSequencer
from sift_query.core.pipeline.step import DefaultsLayer, Sifter, Step
from sift_query.core.pipeline.template import QueryTemplate
from sift_query.core.pipeline.types import Guard, normalize_position


_MARKER = "__sift_query__"
_UNSET = object()


@dataclass(frozen=True)
class _Subject:
    factory: Callable[[Any], Any]


def _invalid(message: str, declaration: Optional[str] = None, hint: Optional[str] = None) -> InvalidDeclarationError:
    return InvalidDeclarationError.from_payload(
        invalid_declaration(message=message, declaration=declaration, hint=hint)
    )


def _declare(target: Any, declaration: Any) -> Any:
    registered = target.__dict__.get(_MARKER)
    if registered is None:
        registered = []
        setattr(target, _MARKER, registered)
    # decorators aplicam de baixo para cima
    registered.insert(0, declaration)
    return target


def declarations_of(value: Any) -> Tuple[Any, ...]:
    own = getattr(value, "__dict__", None)
    if not isinstance(own, Mapping):
        return ()
    return tuple(own.get(_MARKER, ()))


# ---------------------------------------------------------------------------
# Opções
# ---------------------------------------------------------------------------

def _predicates(value: Any, option: str) -> Tuple[Callable[[Any], Any], ...]:
    if value is None:
        return ()
    items = value if isinstance(value, (list, tuple)) else (value,)
    for fn in items:
        if not callable(fn):
            raise _invalid(
                f"'{option}' expects callables, got {type(fn).__name__}",
                declaration=option,
                hint="Passe a função do predicado, não o nome do método.",
            )
    return tuple(items)


def _guard_option(value: Any) -> Optional[Guard]:
    if value is None or isinstance(value, Guard):
        return value
    if callable(value):
        return Guard(predicate=value)
    raise _invalid(f"'guard' expects a callable or Guard, got {type(value).__name__}", declaration="guard")


def _key_condition(
    key: Optional[str],
    equals: Any,
    match: dict,
    *,
    sifter: bool,
    decorator: str,
) -> Tuple[Optional[str], Condition]:
    if match:
        if len(match) != 1 or key is not None or equals is not _UNSET:
            raise _invalid(
                f"{decorator} accepts a single key or a single key=value match",
                declaration=decorator,
            )
        ((key, expected),) = match.items()
        return key, KeyEquals(key=key, expected=expected)

    if key is None:
        if equals is not _UNSET:
            raise _invalid(f"{decorator}(equals=...) requires a key", declaration=decorator)
        return None, Always()

    if not isinstance(key, str) or not key.strip():
        raise _invalid(f"{decorator} key must be a non-empty string", declaration=decorator)

    if equals is not _UNSET:
        return key, KeyEquals(key=key, expected=equals)
    return key, KeyPresent(key=key, require_truthy=sifter)


@dataclass(frozen=True)
class _StepOptions:
    key: Optional[str]
    condition: Condition
    force: bool
    position: Any
    guard: Optional[Guard]

    def build(self, fn: Callable[..., Any]) -> Step:
        if not callable(fn):
            raise _invalid(f"steps decorate functions, got {type(fn).__name__}")
        return Step(
            name=getattr(fn, "__name__", repr(fn)),
            action=fn,
            condition=self.condition,
            force=self.force,
            position=self.position,
            guard=self.guard,
            key=self.key,
        )


def _step_options(*, key, condition, when, unless, position, force, guard) -> _StepOptions:
    return _StepOptions(
        key=key,
        condition=combine(condition, _predicates(when, "when"), _predicates(unless, "unless")),
        force=bool(force),
        position=normalize_position(position),
        guard=_guard_option(guard),
    )


# ---------------------------------------------------------------------------
# Decorators
# ---------------------------------------------------------------------------

def query(*, when=None, unless=None, position=None, force: bool = False, guard=None):
    """Step sem chave: incondicional ou gateado por `when`/`unless`."""
    options = _step_options(
        key=None,
        condition=Always(),
        when=when,
        unless=unless,
        position=position,
        force=force,
        guard=guard,
    )

    def decorator(fn):
        return _declare(fn, options.build(fn))

    return decorator


def query_by(
    key: Optional[str] = None,
    /,
    *,
    equals: Any = _UNSET,
    when=None,
    unless=None,
    position=None,
    force: bool = False,
    guard=None,
    **match: Any,
):
    """Step gateado por presença (`"key"`) ou valor (`key="value"`).

    A ação recebe o valor efetivo do parâmetro como terceiro argumento.
    """
    step_key, condition = _key_condition(key, equals, match, sifter=False, decorator="query_by")
    if step_key is None:
        raise _invalid("query_by requires a key", declaration="query_by", hint="Use @query para steps sem chave.")

    options = _step_options(
        key=step_key,
        condition=condition,
        when=when,
        unless=unless,
        position=position,
        force=force,
        guard=guard,
    )

    def decorator(fn):
        return _declare(fn, options.build(fn))

    return decorator


def sift_by(
    key: Optional[str] = None,
    /,
    *,
    equals: Any = _UNSET,
    when=None,
    unless=None,
    position=None,
    force: bool = False,
    guard=None,
    **match: Any,
):
    """Sifter aplicado a uma classe aninhada.

    Sem `equals` nem `key=value`, a condição padrão é "chave presente e
    verdadeira". O corpo da classe aceita `@query`, `@query_by`,
    `@sift_by`, `@defaults` e `@guard`.
    """
    sifter_key, condition = _key_condition(key, equals, match, sifter=True, decorator="sift_by")
    condition = combine(condition, _predicates(when, "when"), _predicates(unless, "unless"))
    sifter_guard = _guard_option(guard)
    sifter_position = normalize_position(position)

    def decorator(cls):
        if not isinstance(cls, type):
            raise _invalid(
                f"sift_by decorates a nested class, got {type(cls).__name__}",
                declaration="sift_by",
            )
        body = collect_declarations(cls.__dict__, allow_subject=False)
        node = Sifter(
            key=sifter_key,
            name=cls.__name__,
            sequencer=body.sequencer,
            condition=condition,
            force=bool(force),
            position=sifter_position,
            guard=sifter_guard,
            defaults=body.defaults,
            guards=body.guards,
        )
        return _declare(cls, node)

    return decorator


sifter = sift_by


def guard(message=None):
    """Guard da query (ou do sifter em cujo corpo é declarado).

    Pode ser usado como `@guard` ou `@guard("mensagem")`; o método
    decorado recebe `self` e retorna verdadeiro quando o guard passa.
    """
    if callable(message) and not isinstance(message, str):
        return _declare(message, Guard(predicate=message))

    if message is not None and not isinstance(message, str):
        raise _invalid(f"guard message must be a string, got {type(message).__name__}", declaration="guard")

    def decorator(fn):
        return _declare(fn, Guard(predicate=fn, message=message))

    return decorator


def defaults(source):
    """Camada de defaults do nível corrente.

    - `@defaults` em um método `(self) -> Mapping` avaliado a cada resolução
    - `nome = defaults({...})` para um mapeamento fixo
    """
    if isinstance(source, Mapping):
        return DefaultsLayer(source=dict(source))
    if callable(source):
        return _declare(source, DefaultsLayer(source=source, name=getattr(source, "__name__", None)))
    raise _invalid(f"defaults expects a mapping or a method, got {type(source).__name__}", declaration="defaults")


def subject(fn):
    """Marca a factory do scope base `(self) -> scope`."""
    if not callable(fn):
        raise _invalid(f"subject decorates a method, got {type(fn).__name__}", declaration="subject")
    return _declare(fn, _Subject(factory=fn))


# ---------------------------------------------------------------------------
# Coleta
# ---------------------------------------------------------------------------

def collect_declarations(
    namespace: Mapping,
    *,
    base: Optional[QueryTemplate] = None,
    allow_subject: bool = True,
) -> QueryTemplate:
    """
    Constrói o template de um nível a partir do namespace de uma classe.

    Os nós são registrados no sequencer na ordem do namespace (ordem de
    declaração do corpo da classe). Com `base`, as declarações herdadas
    vêm antes das novas.
    """
    sequencer = base.sequencer.copy() if base is not None else StepSequencer()
    layers: List[DefaultsLayer] = list(base.defaults) if base is not None else []
    guards: List[Guard] = list(base.guards) if base is not None else []
    factory = base.subject if base is not None else None

    for attr_name, value in namespace.items():
        if isinstance(value, DefaultsLayer):
            layers.append(value if value.name else replace(value, name=attr_name))
            continue

        for declaration in declarations_of(value):
            if isinstance(declaration, (Step, Sifter)):
                sequencer.add(declaration)
            elif isinstance(declaration, Guard):
                guards.append(declaration)
            elif isinstance(declaration, DefaultsLayer):
                layers.append(declaration)
            elif isinstance(declaration, _Subject):
                if not allow_subject:
                    raise _invalid(
                        f"@subject is only allowed at the query level ({attr_name})",
                        declaration="subject",
                    )
                factory = declaration.factory

    return QueryTemplate(
        sequencer=sequencer,
        defaults=tuple(layers),
        guards=tuple(guards),
        subject=factory,
    )
