# src/sift_query/core/pipeline/step.py
"""
Nós registráveis do pipeline: Step, Sifter e camadas de defaults.

Um **Step** é a menor unidade aplicável: uma condição, um flag `force`,
uma posição declarada, um guard opcional e uma ação que recebe o scope
corrente e devolve o próximo scope.

Um **Sifter** é um step aninhado: tem sua própria condição (por padrão
"chave presente e verdadeira"), suas próprias camadas de defaults e um
`StepSequencer` interno com os nós declarados em seu corpo.

Contrato de ação:
    - `action(host, scope)` para steps sem chave
    - `action(host, scope, value)` para steps com chave, onde `value` é o
      valor efetivo do parâmetro (possivelmente "" ou None quando forçado)
    - o retorno da ação é sempre o novo scope corrente

Invariantes:
    - Nós são imutáveis após o registro
    - A identidade de um step é posicional; sifters carregam `key`
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple, Union

from ..errors import invalid_declaration
from ..exceptions import InvalidDeclarationError
from .conditions import Always, Condition
from .types import Guard, Position, PositionSpec, StepKind

if TYPE_CHECKING:
    from .registry import StepSequencer


@dataclass(frozen=True)
class DefaultsLayer:
    """
    Camada de defaults declarada em uma query ou sifter.

    `source` é um mapeamento fixo ou um callable `(host) -> Mapping`
    avaliado a cada resolução.
    """

    source: Union[Mapping, Callable[[Any], Mapping]]
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.source, Mapping) and not callable(self.source):
            raise InvalidDeclarationError.from_payload(
                invalid_declaration(
                    message=f"defaults must be a mapping or a callable (type={type(self.source).__name__})",
                    declaration=self.name or "defaults",
                )
            )

    def build(self, host: Any) -> Mapping:
        layer = self.source(host) if callable(self.source) else self.source
        if layer is None:
            return {}
        if not isinstance(layer, Mapping):
            raise InvalidDeclarationError.from_payload(
                invalid_declaration(
                    message=f"defaults {self.name or '<inline>'} returned {type(layer).__name__}, expected a mapping",
                    declaration=self.name or "defaults",
                )
            )
        return layer


@dataclass(frozen=True)
class Step:
    name: str
    action: Callable[..., Any]
    condition: Condition = field(default_factory=Always)
    force: bool = False
    position: PositionSpec = Position.DEFAULT
    guard: Optional[Guard] = None
    key: Optional[str] = None

    def __post_init__(self) -> None:
        if not callable(self.action):
            raise InvalidDeclarationError.from_payload(
                invalid_declaration(
                    message=f"Step action must be callable (type={type(self.action).__name__})",
                    declaration=self.name,
                )
            )

    @property
    def kind(self) -> StepKind:
        return StepKind.QUERY


@dataclass(frozen=True)
class Sifter:
    """
    Step aninhado com condição, defaults e sequencer próprios.

    O engine aplica um sifter assim:
        1. avalia a condição (ou `force`); se falhar, pula toda a subárvore
        2. avalia `guard` e `guards` do sifter
        3. empilha `defaults` como camadas internas do ParamContext
        4. roda os nós de `sequencer` contra o mesmo objeto de scope
        5. restaura o ParamContext externo
    """

    key: Optional[str]
    name: str
    sequencer: "StepSequencer"
    condition: Condition = field(default_factory=Always)
    force: bool = False
    position: PositionSpec = Position.DEFAULT
    guard: Optional[Guard] = None
    defaults: Tuple[DefaultsLayer, ...] = ()
    guards: Tuple[Guard, ...] = ()

    @property
    def kind(self) -> StepKind:
        return StepKind.SIFTER


Node = Union[Step, Sifter]
