# src/sift_query/core/config/errors.py
"""
Exceções canônicas da camada de configuração do sift-query.

As exceções aqui definidas representam falhas ao carregar arquivos de
configuração (settings de query ou camadas de defaults) e ao validar
settings, e não falhas de resolução.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa violação de guard ou erro de step
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do sift-query.

    Permite captura genérica de falhas de carregamento, merge e
    validação de settings.
    """


class ConfigFileNotFoundError(ConfigError):
    """
    Arquivo de configuração base não encontrado no caminho informado.

    O arquivo base é obrigatório; o arquivo local de override é opcional
    e sua ausência não é erro.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz do arquivo não é um dicionário (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"query": {"raise_on_guard_violation": true}}
        - override: {"query": "strict"}
    """


class UnknownSettingError(ConfigError):
    """Chave de settings não reconhecida."""


class InvalidSettingTypeError(ConfigError):
    """Valor de setting com tipo incompatível."""
