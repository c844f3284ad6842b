# src/sift_query/core/config/merge.py
"""
Deep-merge de mapeamentos de configuração.

Usado pelo loader para sobrepor um arquivo local a um arquivo base
(settings de query ou camadas de defaults vindas de disco).

Política de merge (v1):
    - dict + dict → merge recursivo por chave
    - list        → sobrescrita total
    - escalar     → sobrescrita direta
    - tipos diferentes → `ConfigTypeConflictError`

Nenhum input é mutado; `None` no override é tratado como escalar e
pode substituir qualquer valor (é assim que um arquivo local "apaga"
um default).
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combina `base` e `override` em um novo dicionário.

    Args:
        base (Dict[str, Any]): Mapeamento base (ex.: arquivo de defaults).
        override (Dict[str, Any]): Mapeamento com precedência.

    Returns:
        Dict[str, Any]: Novo dicionário resultante.

    Raises:
        ConfigTypeConflictError: Se uma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        current = result.get(key)

        if key not in result or current is None or value is None:
            result[key] = deepcopy(value)
        elif isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = deepcopy(value)
        elif isinstance(current, dict) or isinstance(value, dict) or type(current) is not type(value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )
        else:
            result[key] = deepcopy(value)

    return result
