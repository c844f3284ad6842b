# src/sift_query/core/pipeline/types.py
"""
Tipos canônicos do pipeline do sift-query.

Este módulo define as estruturas e enums fundamentais compartilhados
entre declarações, sequencer e engine.

Componentes principais:
    - Position    → posição declarada de inserção (DEFAULT, FIRST, LAST ou índice)
    - StepKind    → classificação de um nó registrado (step ou sifter)
    - StepStatus  → estados finais de um nó em uma resolução
    - StepOutcome → registro imutável do que aconteceu com um nó
    - Guard       → asserção (predicado + mensagem) de step, sifter ou query

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Nenhuma lógica de execução vive neste módulo

Invariantes:
    - Enums possuem valores textuais canônicos
    - StepOutcome e Guard são imutáveis
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from ..errors import invalid_declaration
from ..exceptions import InvalidDeclarationError


class Position(str, Enum):
    """
    Posições simbólicas de inserção de um nó no sequencer.

    Um índice inteiro também é uma posição válida (ver `PositionSpec`):
    ele insere o nó no grupo do meio, relativo ao tamanho do grupo no
    momento do registro.
    """
    DEFAULT = "default"
    FIRST = "first"
    LAST = "last"


PositionSpec = Union[Position, int]


def normalize_position(value: Any) -> PositionSpec:
    """Converte a posição declarada em `Position` ou índice inteiro.

    Aceita None, "default", "first", "last", membros de `Position` e
    inteiros (booleanos são rejeitados).
    """
    if value is None:
        return Position.DEFAULT
    if isinstance(value, Position):
        return value
    if isinstance(value, bool):
        raise InvalidDeclarationError.from_payload(
            invalid_declaration(message=f"Invalid step position: {value!r}", declaration="position")
        )
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return Position(value.strip().lower())
        except ValueError:
            pass
    raise InvalidDeclarationError.from_payload(
        invalid_declaration(
            message=f"Invalid step position: {value!r}",
            declaration="position",
            hint="Use 'first', 'last', 'default' ou um índice inteiro.",
        )
    )


class StepKind(str, Enum):
    QUERY = "query"
    SIFTER = "sifter"


class StepStatus(str, Enum):
    """
    Estados finais de um nó dentro de uma resolução.

    Estados definidos:
        - APPLIED: condição satisfeita (ou forçada) e ação executada
        - SKIPPED: condição não satisfeita; a ação não rodou
        - HALTED: um guard do nó falhou com a política "record"
    """
    APPLIED = "applied"
    SKIPPED = "skipped"
    HALTED = "halted"


@dataclass(frozen=True)
class StepOutcome:
    """Registro imutável do destino de um nó em uma resolução."""

    step_id: str
    kind: StepKind
    status: StepStatus
    summary: str
    depth: int = 0


@dataclass(frozen=True)
class Guard:
    """
    Asserção avaliada pelo engine antes de uma ação.

    O predicado recebe o host (instância da query) e, para steps com
    chave, também o valor efetivo do parâmetro. Um retorno falso viola o
    guard; o que acontece em seguida depende da política da query.
    """

    predicate: Callable[..., Any]
    message: Optional[str] = None

    def __post_init__(self) -> None:
        if not callable(self.predicate):
            raise InvalidDeclarationError.from_payload(
                invalid_declaration(
                    message=f"Guard predicate must be callable (type={type(self.predicate).__name__})",
                    declaration="guard",
                )
            )
