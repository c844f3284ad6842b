# src/sift_query/core/config/loader.py
"""
Loader de arquivos de configuração do sift-query.

Arquivos de configuração alimentam dois pontos opcionais da biblioteca:
    - settings de uma classe de query (`load_settings` / `Query.configure`)
    - camadas de defaults vindas de disco (`defaults(load_config(...))`)

A configuração efetiva é resolvida a partir de:
    - um arquivo base (obrigatório)
    - um arquivo local de overrides (opcional; ausente não é erro)

Formatos suportados (v1):
    - YAML (.yaml, .yml) via PyYAML (`yaml.safe_load`)
    - JSON (.json)

Invariantes:
    - O resultado é sempre um `dict` puro
    - Arquivos vazios equivalem a `{}`
    - O override local nunca muta o conteúdo base
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    ConfigFileNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


PathLike = Union[str, Path]


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo de configuração e valida que a raiz é um dicionário.

    Raises:
        ConfigFileNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega o arquivo base e, se existir, aplica o override local.

    Args:
        defaults_path: Caminho do arquivo base (obrigatório).
        local_path: Caminho opcional do override local.

    Returns:
        Dict[str, Any]: Configuração resolvida.
    """
    effective = _load_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective
