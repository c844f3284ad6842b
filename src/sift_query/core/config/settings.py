# src/sift_query/core/config/settings.py
"""
Settings por classe de query.

`QuerySettings` reúne as políticas que valem para uma classe inteira
(e não para um guard ou step isolado):

    - raise_on_guard_violation (bool, padrão True): política de guards
    - subject_name (str, padrão "scope"): alias de acesso ao scope corrente

Settings podem vir de atributos de classe, de um mapeamento ou de um
arquivo de configuração, sempre sob a seção `query`:

    query:
      raise_on_guard_violation: false
      subject_name: relation
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .errors import InvalidSettingTypeError, UnknownSettingError
from .loader import PathLike, load_config


SETTINGS_SECTION = "query"


@dataclass(frozen=True)
class QuerySettings:
    raise_on_guard_violation: bool = True
    subject_name: str = "scope"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "QuerySettings":
        """Valida e constrói settings a partir de um mapeamento simples.

        Raises:
            UnknownSettingError: chave não reconhecida.
            InvalidSettingTypeError: valor com tipo incompatível.
        """
        expected = {f.name: f.type for f in fields(cls)}
        unknown = sorted(set(data) - set(expected))
        if unknown:
            raise UnknownSettingError(
                f"Settings desconhecidos: {', '.join(unknown)} "
                f"(suportados: {', '.join(sorted(expected))})"
            )

        values = {}
        for key, value in data.items():
            if key == "raise_on_guard_violation" and not isinstance(value, bool):
                raise InvalidSettingTypeError(
                    f"'{key}' deve ser bool, recebido: {type(value).__name__}"
                )
            if key == "subject_name" and (not isinstance(value, str) or not value.isidentifier()):
                raise InvalidSettingTypeError(
                    f"'{key}' deve ser um identificador Python, recebido: {value!r}"
                )
            values[key] = value

        return cls(**values)


def load_settings(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> QuerySettings:
    """Carrega a seção `query` de um arquivo de configuração."""
    config = load_config(defaults_path=defaults_path, local_path=local_path)
    section = config.get(SETTINGS_SECTION) or {}
    if not isinstance(section, dict):
        raise InvalidSettingTypeError(
            f"Seção '{SETTINGS_SECTION}' deve ser dict, recebido: {type(section).__name__}"
        )
    return QuerySettings.from_mapping(section)
