# src/sift_query/base.py
"""
Classe base `Query`.

Uma subclasse de `Query` declara, no corpo da classe, o pipeline de
steps condicionais que transforma um scope base. Em `__init_subclass__`
as declarações são coletadas em um `QueryTemplate` imutável; cada
`resolve()` executa esse template com um `ResolutionEngine` e um
`ResolutionState` próprios.

Responsabilidades:
    - validar e vincular `attributes` declarados no construtor
    - montar os parâmetros explícitos de cada chamada (construtor ⊕ overrides)
    - escolher o scope base (construtor, `@subject` ou cópia rasa do scope
      do construtor tirada no início da resolução externa)
    - expor `params`/`scope` do nível em execução às ações
    - expor o resultado da última resolução externa (`violation`,
      `last_resolution`)

Cross-resolution:
    Uma ação pode chamar `self.resolve(...)`. A chamada aninhada empilha
    um novo estado; ao retornar, `self.params` e `self.scope` voltam a
    refletir a resolução externa.

Limites explícitos:
    - Não é thread-safe (uma instância, uma resolução por vez)
    - Não interpreta o scope
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Union

from sift_query.core.config.settings import QuerySettings
from sift_query.core.engine.engine import ResolutionEngine, ResolutionResult, enforce_guard
from sift_query.core.errors import invalid_declaration, undefined_subject, unknown_attribute
from sift_query.core.exceptions import InvalidDeclarationError, UndefinedSubjectError, UnknownAttributeError
from sift_query.core.pipeline.context import ResolutionState
from sift_query.core.pipeline.params import ParamContext
from sift_query.core.pipeline.template import QueryTemplate
from sift_query.declarations import collect_declarations


RESERVED_NAMES = frozenset(
    {
        "params",
        "scope",
        "resolve",
        "guard",
        "violation",
        "last_resolution",
        "activate",
        "settings",
        "configure",
        "attributes",
        "raise_on_guard_violation",
        "subject_name",
    }
)

Overrides = Union[None, str, Mapping, List[str], Tuple[str, ...]]


def _invalid(message: str, declaration: str) -> InvalidDeclarationError:
    return InvalidDeclarationError.from_payload(
        invalid_declaration(message=message, declaration=declaration)
    )


def _validate_attributes(owner: str, names: Any) -> Tuple[str, ...]:
    if isinstance(names, str) or not isinstance(names, (list, tuple)):
        raise _invalid(
            f"{owner}.attributes must be a list or tuple of names, got {type(names).__name__}",
            declaration="attributes",
        )
    for name in names:
        if not isinstance(name, str) or not name.isidentifier():
            raise _invalid(f"{owner}: invalid attribute name {name!r}", declaration="attributes")
        if name in RESERVED_NAMES:
            raise _invalid(f"{owner}: attribute name {name!r} is reserved", declaration="attributes")
    return tuple(names)


def _validate_subject_name(owner: str, name: Any) -> str:
    if not isinstance(name, str) or not name.isidentifier():
        raise _invalid(f"{owner}.subject_name must be an identifier, got {name!r}", declaration="subject_name")
    if name != "scope" and name in RESERVED_NAMES:
        raise _invalid(f"{owner}.subject_name {name!r} is reserved", declaration="subject_name")
    return name


def normalize_overrides(overrides: Overrides) -> Dict[str, Any]:
    """`"foo"` → `{"foo": True}`; `["a", "b"]` → `{"a": True, "b": True}`."""
    if overrides is None:
        return {}
    if isinstance(overrides, str):
        return {overrides: True}
    if isinstance(overrides, Mapping):
        return dict(overrides)
    if isinstance(overrides, (list, tuple)):
        for key in overrides:
            if not isinstance(key, str):
                raise TypeError(f"override keys must be strings (type={type(key).__name__})")
        return {key: True for key in overrides}
    raise TypeError(
        f"overrides must be a mapping, a key or a sequence of keys (type={type(overrides).__name__})"
    )


class Query:
    """
    Pipeline declarativo de refinamento condicional de um scope.

    Atributos de classe:
        - attributes: nomes aceitos como keyword no construtor
        - raise_on_guard_violation: política de guard (True levanta,
          False registra a mensagem em `violation` e retorna None)
        - subject_name: alias de `scope` durante a resolução
    """

    attributes: ClassVar[Tuple[str, ...]] = ()
    raise_on_guard_violation: ClassVar[bool] = True
    subject_name: ClassVar[str] = "scope"

    _sift_template: ClassVar[QueryTemplate] = QueryTemplate()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.attributes = _validate_attributes(cls.__name__, cls.attributes)
        _validate_subject_name(cls.__name__, cls.subject_name)

        base = next(
            (b._sift_template for b in cls.__mro__[1:] if "_sift_template" in b.__dict__),
            QueryTemplate(),
        )
        cls._sift_template = collect_declarations(cls.__dict__, base=base)

    def __init__(self, params: Optional[Mapping] = None, scope: Any = None, **attributes: Any):
        if params is not None and not isinstance(params, Mapping):
            raise TypeError(f"params must be a mapping (type={type(params).__name__})")

        declared = type(self).attributes
        unknown = sorted(set(attributes) - set(declared))
        if unknown:
            raise UnknownAttributeError.from_payload(
                unknown_attribute(query=type(self).__name__, unknown=unknown, declared=list(declared))
            )

        self._params: Dict[str, Any] = dict(params or {})
        self._initial_scope = scope
        self._scope_snapshot: Any = None
        self._states: List[ResolutionState] = []
        self._last: Optional[ResolutionResult] = None

        for name in declared:
            setattr(self, name, attributes.get(name))

    # ------------------------------------------------------------------
    # Configuração por classe
    # ------------------------------------------------------------------
    @classmethod
    def settings(cls) -> QuerySettings:
        return QuerySettings(
            raise_on_guard_violation=cls.raise_on_guard_violation,
            subject_name=cls.subject_name,
        )

    @classmethod
    def configure(cls, settings: Union[QuerySettings, Mapping]) -> None:
        """Aplica settings (objeto ou mapeamento) à classe."""
        if isinstance(settings, Mapping):
            settings = QuerySettings.from_mapping(settings)
        if not isinstance(settings, QuerySettings):
            raise TypeError(f"settings must be QuerySettings or a mapping (type={type(settings).__name__})")
        cls.raise_on_guard_violation = settings.raise_on_guard_violation
        cls.subject_name = _validate_subject_name(cls.__name__, settings.subject_name)

    # ------------------------------------------------------------------
    # Estado visível às ações
    # ------------------------------------------------------------------
    @property
    def params(self) -> ParamContext:
        if self._states:
            return self._states[-1].params
        return ParamContext(explicit=self._params)

    @property
    def scope(self) -> Any:
        if self._states:
            return self._states[-1].scope
        return self._initial_scope

    @property
    def violation(self) -> Optional[str]:
        return self._last.violation if self._last is not None else None

    @property
    def last_resolution(self) -> Optional[ResolutionResult]:
        return self._last

    def __getattr__(self, name: str) -> Any:
        # só chamado quando o lookup normal falha
        alias = type(self).subject_name
        if name == alias and alias != "scope":
            return self.scope
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    @contextmanager
    def activate(self, state: ResolutionState) -> Iterator[None]:
        self._states.append(state)
        try:
            yield
        finally:
            self._states.pop()

    # ------------------------------------------------------------------
    # Resolução
    # ------------------------------------------------------------------
    def resolve(self, overrides: Overrides = None, **extra: Any) -> Any:
        """
        Executa o pipeline e retorna o scope final.

        Args:
            overrides: mapeamento, chave única (`{key: True}`) ou sequência
                de chaves, sobrepostos aos parâmetros do construtor.
            **extra: overrides adicionais por keyword.

        Returns:
            O scope final, ou None quando um guard interrompe a resolução
            com `raise_on_guard_violation = False`.

        Raises:
            UndefinedSubjectError: nenhum scope base disponível.
            GuardViolationError: guard falhou com a política padrão.
        """
        cls = type(self)
        outermost = not self._states
        template = cls._sift_template
        if outermost:
            self._last = None
            # cópia tirada antes de qualquer step mutar o scope do construtor
            self._scope_snapshot = None
            if template.subject is None and self._initial_scope is not None:
                self._scope_snapshot = copy.copy(self._initial_scope)

        params = dict(self._params)
        params.update(normalize_overrides(overrides))
        params.update(extra)

        engine = ResolutionEngine(
            template=template,
            host=self,
            raise_on_guard_violation=cls.raise_on_guard_violation,
        )
        result = engine.run(params=params, scope=self._base_scope(template, outermost))

        if outermost:
            self._last = result
        return result.scope

    def guard(self, passed: Any, message: Optional[str] = None) -> None:
        """Guard chamado de dentro de uma ação; segue a política da classe."""
        if not self._states:
            raise RuntimeError("guard() can only be called while the query is resolving")
        state = self._states[-1]
        enforce_guard(
            state,
            passed=passed,
            message=message,
            step_id=state.active_step or type(self).__name__,
        )

    def _base_scope(self, template: QueryTemplate, outermost: bool) -> Any:
        if outermost and self._initial_scope is not None:
            return self._initial_scope
        if template.subject is not None:
            return template.subject(self)
        if self._scope_snapshot is not None:
            return copy.copy(self._scope_snapshot)
        raise UndefinedSubjectError.from_payload(undefined_subject(query=type(self).__name__))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(params={self._params!r})"
