"""Configuração da aplicação."""
import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class BuilderConfig:
    """Configuração do model builder."""

    strict_names: bool = False  # DuplicateSchemaNameError instead of a warning

    @classmethod
    def from_env(cls) -> "BuilderConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(strict_names=_env_flag("SWAGGER_STRICT_NAMES"))


@dataclass
class AppConfig:
    """Configuração da aplicação."""

    output_dir: str = "./output"
    log_level: str = "WARNING"
    json_indent: int = 2
    builder: BuilderConfig = None

    def __post_init__(self):
        """Inicializa valores padrão."""
        if self.builder is None:
            self.builder = BuilderConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            output_dir=os.getenv("SWAGGER_OUTPUT_DIR", "./output"),
            log_level=os.getenv("SWAGGER_LOG_LEVEL", "WARNING"),
            json_indent=int(os.getenv("SWAGGER_JSON_INDENT", "2")),
            builder=BuilderConfig.from_env(),
        )


# Instância global
app_config = AppConfig.from_env()
