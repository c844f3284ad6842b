# src/sift_query/core/pipeline/scope.py
"""
Apresentação do scope resolvido como mapeamento simples.

O engine nunca interpreta o conteúdo do scope. Código externo, porém,
precisa de uma forma estável de consumir o resultado; `to_mapping`
converte os tipos de scope mais comuns em um `dict` puro.

Tipos suportados (v1), nesta ordem de preferência:
    - None            → {}
    - Mapping         → cópia rasa em dict
    - objeto com `to_dict()` (ex.: pandas.DataFrame) → resultado convertido
    - dataclass       → `dataclasses.asdict`
    - objeto com `__dict__` (ex.: SimpleNamespace) → atributos públicos
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from typing import Any, Dict


def to_mapping(scope: Any) -> Dict[str, Any]:
    if scope is None:
        return {}

    if isinstance(scope, Mapping):
        return dict(scope)

    to_dict = getattr(scope, "to_dict", None)
    if callable(to_dict):
        data = to_dict()
        if not isinstance(data, Mapping):
            raise TypeError(
                f"{type(scope).__name__}.to_dict() must return a mapping (got {type(data).__name__})"
            )
        return dict(data)

    if is_dataclass(scope) and not isinstance(scope, type):
        return asdict(scope)

    attrs = getattr(scope, "__dict__", None)
    if isinstance(attrs, dict):
        return {k: v for k, v in attrs.items() if not k.startswith("_")}

    raise TypeError(f"Cannot convert scope of type {type(scope).__name__} to a mapping")
