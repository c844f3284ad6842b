# src/sift_query/core/engine/planner.py
"""
Planejador de execução de um nível do pipeline.

Este módulo transforma um `StepSequencer` na sequência linear de nós
que o engine percorre. O trabalho pesado de ordenação já acontece no
registro (incremental); aqui apenas concatenamos os grupos e validamos
a estrutura antes da execução.

Decisões arquiteturais:
    - Ordem final: `first ++ middle ++ last`
    - Cada grupo preserva sua ordem interna
    - Nós inválidos são erro estrutural fatal

Invariantes:
    - Todo nó registrado aparece exatamente uma vez no plano
    - O mesmo sequencer sempre produz o mesmo plano

Limites explícitos:
    - Não avalia condições nem guards
    - Não desce em sifters (cada nível é planejado ao ser aplicado)
"""

from __future__ import annotations

from typing import List

from sift_query.core.pipeline.registry import StepSequencer
from sift_query.core.pipeline.step import Node, Sifter, Step


def plan_execution(sequencer: StepSequencer) -> List[Node]:
    """
    Produz a ordem de execução de um nível a partir do sequencer.

    Args:
        sequencer (StepSequencer): Registro incremental do nível.

    Returns:
        List[Node]: Steps e sifters na ordem em que devem ser avaliados.

    Raises:
        TypeError: Se algum nó registrado não for `Step` nem `Sifter`.
    """
    first, middle, last = sequencer.groups()
    plan: List[Node] = [*first, *middle, *last]

    for node in plan:
        if not isinstance(node, (Step, Sifter)):
            raise TypeError(f"Unsupported pipeline node: {type(node).__name__}")

    return plan
