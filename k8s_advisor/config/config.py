import json
import os
from typing import Dict, Any, List, Optional, Union, Type, get_origin, get_args
from k8s_advisor.config.default import DefaultConfig
from k8s_advisor.utils.exceptions import ConfigError
from dotenv import load_dotenv
# Load environment variables
load_dotenv()

class Config:
    """
    Configuration class for K8s Advisor.

    Precedence order for config values:
    1. Defaults from DefaultConfig
    2. Runtime/programmatic overrides (via config dict)
    3. Environment variables (including .env)

    All config keys are available as attributes and in the internal _config dict.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the configuration.
        Args:
            config: Optional configuration dictionary to override defaults
        """
        # Start with default configuration
        default_config = {key: getattr(DefaultConfig, key) for key in dir(DefaultConfig) if not key.startswith('_')}

        # Merge with provided config
        self._config = default_config.copy()
        self._config.update(config or {})

        # Set attributes from configuration and environment variables
        self._set_attributes(self._config)

    def _set_attributes(self, config: Dict[str, Any]) -> None:
        """
        Set attributes from configuration and environment variables.
        Environment variables take precedence over defaults and runtime config.
        Updates both attributes and the internal _config dict.
        Args:
            config: Configuration dictionary
        """
        annotations = DefaultConfig.__annotations__
        for key, value in config.items():
            env_value = os.getenv(key)
            if env_value is not None and key in annotations:
                value = self.convert_env_value(key, env_value, annotations[key])
            setattr(self, key.lower(), value)
            self._config[key] = value  # Ensure internal dict reflects env override

    def __getattr__(self, item: str) -> Any:
        """
        Allow attribute-style access to config keys.
        Raises AttributeError if the key is missing.
        """
        config = self.__dict__.get('_config', {})
        if item in config:
            return config[item]
        raise AttributeError(f"'Config' object has no attribute '{item}'")

    def get(self, key: str, default: Any = None) -> Any:
        """Dictionary-style lookup by upper-case config key."""
        return self._config.get(key, default)

    @property
    def llm_config(self) -> Dict[str, Any]:
        """Get the standard LLM configuration."""
        return {
            'provider': self._config.get('LLM_PROVIDER') or 'openai',
            'model': self._config.get('LLM_MODEL') or 'gpt-4o-mini',
            'temperature': self._config.get('LLM_TEMPERATURE', 0.0),
            'max_tokens': self._config.get('LLM_MAX_TOKENS') or 15000,
            'timeout': self._config.get('LLM_TIMEOUT') or 120,
        }

    def get_llm_config(self) -> Dict[str, Any]:
        """Get standard LLM configuration.

        Returns:
            Standard LLM configuration dictionary
        """
        return self.llm_config

    def set_llm_config(self, config: Dict[str, Any]) -> None:
        """Set the standard LLM configuration.

        Args:
            config: Standard LLM configuration dictionary
        """
        for key, value in config.items():
            if key == 'provider':
                self._config['LLM_PROVIDER'] = value
            elif key == 'model':
                self._config['LLM_MODEL'] = value
            elif key == 'temperature':
                self._config['LLM_TEMPERATURE'] = value
            elif key == 'max_tokens':
                self._config['LLM_MAX_TOKENS'] = value
            elif key == 'timeout':
                self._config['LLM_TIMEOUT'] = value

    @property
    def embedding_config(self) -> Dict[str, Any]:
        """Get the embedding provider configuration."""
        return {
            'provider': self._config.get('EMBEDDING_PROVIDER') or 'openai',
            'model': self._config.get('EMBEDDING_MODEL') or 'text-embedding-3-small',
            'dimensions': self._config.get('EMBEDDING_DIMENSIONS') or 1536,
        }

    @property
    def vector_db_config(self) -> Dict[str, Any]:
        """Get the Qdrant connection settings and collection names."""
        return {
            'url': self._config.get('QDRANT_URL'),
            'api_key': self._config.get('QDRANT_API_KEY'),
            'collections': {
                'capabilities': self._config.get('QDRANT_CAPABILITIES_COLLECTION') or 'capabilities',
                'patterns': self._config.get('QDRANT_PATTERNS_COLLECTION') or 'patterns',
                'policies': self._config.get('QDRANT_POLICIES_COLLECTION') or 'policies',
            }
        }

    @staticmethod
    def convert_env_value(key: str, env_value: str, type_hint: Type) -> Any:
        """Convert environment variable to the appropriate type.

        Args:
            key: Configuration key
            env_value: Environment variable value
            type_hint: Type hint for the value

        Returns:
            Converted value
        """
        origin = get_origin(type_hint)
        args = get_args(type_hint)

        if origin is Union:
            if type(None) in args and env_value.strip().lower() in ("none", "null", ""):
                return None
            for arg in args:
                if arg is type(None):
                    continue
                try:
                    return Config.convert_env_value(key, env_value, arg)
                except Exception:
                    continue
            raise ConfigError(f"Cannot convert {env_value} to any of {args}")

        if type_hint is bool:
            return env_value.lower() in ("true", "1", "yes", "on")
        elif type_hint is int:
            return int(env_value)
        elif type_hint is float:
            return float(env_value)
        elif type_hint in (str, Any):
            return env_value
        elif type_hint is list or origin is list or origin is List:
            return json.loads(env_value)
        else:
            raise ConfigError(f"Unsupported type {type_hint} for key {key}")

    @classmethod
    def load_config(cls, config_path: str) -> Dict[str, Any]:
        """Load configuration overrides from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Configuration dictionary (defaults merged with file contents)
        """
        if not os.path.exists(config_path):
            raise ConfigError(f"Configuration not found at '{config_path}'")

        with open(config_path, "r") as f:
            custom_config = json.load(f)

        if not isinstance(custom_config, dict):
            raise ConfigError(f"Configuration file '{config_path}' must contain a JSON object")

        # Merge with default config
        merged_config = {key: getattr(DefaultConfig, key) for key in dir(DefaultConfig) if not key.startswith('_')}
        merged_config.update(custom_config)
        return merged_config
