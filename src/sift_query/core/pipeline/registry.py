# src/sift_query/core/pipeline/registry.py
"""
Registro ordenado de nós do pipeline (StepSequencer).

Este módulo define o `StepSequencer`, responsável por registrar steps e
sifters e por manter, de forma incremental, a ordem de execução
derivada das posições declaradas.

Algoritmo de ordenação (v1):
    - FIRST   → anexado ao grupo `first`
    - LAST    → anexado ao grupo `last`
    - DEFAULT → anexado ao grupo do meio
    - índice n → inserido no grupo do meio em
      `clamp(n if n >= 0 else len(meio) + n, 0, len(meio))`

O índice é relativo ao tamanho do grupo do meio **no momento do
registro**, não ao tamanho final: a ordem é construída a cada `add`,
e não por uma ordenação única ao final.

Invariantes:
    - Cada grupo preserva a ordem interna em que foi construído
    - A ordem final é `first ++ middle ++ last` (ver `engine.planner`)
    - Nós registrados nunca são removidos

Limites explícitos:
    - Não avalia condições
    - Não executa ações
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .step import Node
from .types import Position, normalize_position


@dataclass
class StepSequencer:
    """
    Registro canônico e incremental da ordem dos nós de um nível.

    Cada query e cada sifter possuem o seu. Depois de construído pela
    declaração da classe, o sequencer não é mais alterado.
    """

    _first: List[Node] = field(default_factory=list, init=False, repr=False)
    _middle: List[Node] = field(default_factory=list, init=False, repr=False)
    _last: List[Node] = field(default_factory=list, init=False, repr=False)

    def add(self, node: Node) -> None:
        position = normalize_position(node.position)

        if position is Position.FIRST:
            self._first.append(node)
        elif position is Position.LAST:
            self._last.append(node)
        elif position is Position.DEFAULT:
            self._middle.append(node)
        else:
            size = len(self._middle)
            index = position if position >= 0 else size + position
            self._middle.insert(max(0, min(index, size)), node)

    def groups(self) -> tuple:
        return tuple(self._first), tuple(self._middle), tuple(self._last)

    def copy(self) -> "StepSequencer":
        clone = StepSequencer()
        clone._first.extend(self._first)
        clone._middle.extend(self._middle)
        clone._last.extend(self._last)
        return clone

    def __len__(self) -> int:
        return len(self._first) + len(self._middle) + len(self._last)
