import os
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path

from pydantic import BaseModel

from user_table.runtime.config.config_data import ConfigData
from user_table.runtime.config.config_template import load_templated_yaml
from user_table.runtime.config.settings import EnvironmentVariables


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


def load_config(path: Path | None = None) -> ConfigData:
    """Load config.yaml and layer the plain environment variables on top.

    Args:
        path: Configuration file; defaults to ``$USER_TABLE_CONFIG`` or
            ``config.yaml`` in the working directory.

    Returns:
        ConfigData: The resolved configuration.
    """
    path = path or Path(os.getenv("USER_TABLE_CONFIG", "config.yaml"))
    config = load_templated_yaml(path)

    env_vars = EnvironmentVariables()
    if env_vars.users_api_url:
        config.api.base_url = env_vars.users_api_url.rstrip("/")
    if env_vars.log_level:
        config.logging.level = env_vars.log_level.upper()
    if "environment" in env_vars.model_fields_set:
        config.app.environment = env_vars.environment

    return config


_default_context = AppContext(config=load_config())

_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=_default_context
)


def get_context() -> AppContext:
    """Get the current application context."""
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Set the current application context.

    Args:
        context: AppContext instance to set as current.
    """
    return _app_context.set(context)


def get_config() -> ConfigData:
    """Get the current application configuration."""
    return get_context().config


def set_config(config: ConfigData) -> None:
    """Set the current application configuration.

    This replaces the entire current configuration with the provided one.
    """
    set_context(replace(get_context(), config=config))


def _recursive_model_dump_exclude_unset(model: BaseModel) -> dict:
    """Recursively dump a Pydantic model keeping only explicitly set fields.

    A nested model is included in full as soon as any field below it was set.
    """
    result = {}
    explicitly_set_fields = model.model_fields_set

    for field_name in model.__class__.model_fields:
        field_value = getattr(model, field_name)

        if isinstance(field_value, BaseModel):
            if _recursive_model_dump_exclude_unset(field_value) or (
                field_name in explicitly_set_fields
            ):
                result[field_name] = field_value.model_dump()
        elif field_name in explicitly_set_fields:
            result[field_name] = field_value

    return result


def _recursive_dict_merge(base_dict: dict, override_dict: dict) -> dict:
    """Recursively merge ``override_dict`` into a copy of ``base_dict``."""
    result = base_dict.copy()

    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _recursive_dict_merge(result[key], value)
        else:
            result[key] = value

    return result


def _merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    """Merge ``override_config`` into ``base_config``; set values win."""
    base_dict = base_config.model_dump()
    override_dict = _recursive_model_dump_exclude_unset(override_config)
    merged_dict = _recursive_dict_merge(base_dict, override_dict)
    return ConfigData.model_validate(merged_dict)


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Context manager for temporarily overriding the application context.

    Only the fields explicitly set on ``config_override`` replace the current
    values; everything else is inherited.

    Example:
        with with_context(ConfigData(api=ApiConfig(base_url="http://api.test"))):
            assert get_config().api.base_url == "http://api.test"
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    merged_config = _merge_configs(get_context().config, config_override)
    token = set_context(replace(get_context(), config=merged_config))
    try:
        yield
    finally:
        _app_context.reset(token)
