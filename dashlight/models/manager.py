from __future__ import annotations
from typing import Optional, Dict, Any, List, Union
from pathlib import Path
from dataclasses import dataclass, field
from enum import Enum
import yaml
import logging

from .prompts import PromptManager
from .providers.base import ModelProvider
from .providers.gemini import GeminiProvider
from dashlight.pipeline.dispatch import PromptDispatcher, DispatcherConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
PACKAGE_ROOT = Path(__file__).parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "config.yaml"
DEFAULT_PROMPTS_DIR = PACKAGE_ROOT / "prompts"


class Provider(Enum):
    GEMINI = "gemini"

@dataclass(frozen=True)
class TaskConfig:
    provider: str
    model: str
    prompt_ref: str #e.g. "dashboard/analyze@v1"
    params: Dict[str, Any] = field(default_factory=dict)


class ModelManager:
    def __init__(self, config_path: Union[Path, str] = DEFAULT_CONFIG_PATH, prompts_dir: Optional[Path] = None):
        self.config_path = Path(config_path)
        self.config = self._load_config()
        self._providers: Dict[str, ModelProvider] = {}
        self.prompts = PromptManager(prompts_dir or DEFAULT_PROMPTS_DIR)

    def _load_config(self) -> Dict:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        if 'providers' not in config:
            raise ValueError("Config missing 'providers'")
        if 'tasks' not in config:
            raise ValueError("Config missing 'tasks'")

        for task_name, task_cfg in config['tasks'].items():
            for key in ('provider', 'model', 'prompt_ref'):
                if key not in task_cfg:
                    raise ValueError(f"Task '{task_name}' missing {key}")

            provider_name = task_cfg['provider']
            if provider_name not in config['providers']:
                raise ValueError(f"Task '{task_name}' references unknown provider '{provider_name}'")

        return config

    @property
    def upload_max_bytes(self) -> int:
        upload = self.config.get('upload') or {}
        return int(upload.get('max_bytes', DEFAULT_MAX_UPLOAD_BYTES))

    @property
    def cors_origins(self) -> List[str]:
        cors = self.config.get('cors') or {}
        return list(cors.get('allow_origins', ["*"]))

    def task_config(self, task: str) -> TaskConfig:
        if task not in self.config["tasks"]:
            raise ValueError(f"Unknown task: {task}")
        task_cfg = self.config["tasks"][task]
        return TaskConfig(
            provider=task_cfg["provider"],
            model=task_cfg["model"],
            prompt_ref=task_cfg["prompt_ref"],
            params=dict(task_cfg.get("params") or {}),
        )

    def _get_provider(self, provider_name: str) -> ModelProvider:
        if provider_name in self._providers:
            return self._providers[provider_name]
        if provider_name not in self.config['providers']:
            raise ValueError(f"Unknown provider: {provider_name}")

        provider_cfg = self.config["providers"][provider_name]
        provider_type = provider_cfg["type"]
        settings = provider_cfg.get("settings") or {}

        if provider_type == Provider.GEMINI.value:
            provider = GeminiProvider(**settings)
        else:
            raise ValueError(f"Unknown provider type: {provider_type}")
        self._providers[provider_name] = provider
        logger.info(f"initialized provider: {provider_name}")
        return provider

    def dispatcher(self, task: str) -> PromptDispatcher:
        """Build the dispatcher for ``task``: provider handle plus the rendered instruction."""
        task_cfg = self.task_config(task)
        config = DispatcherConfig(
            model=task_cfg.model,
            instruction_text=self.prompts.render(task_cfg.prompt_ref),
            params=task_cfg.params,
            prompt_ref=task_cfg.prompt_ref,
        )
        return PromptDispatcher(self._get_provider(task_cfg.provider), config)

    def cleanup(self):
        self._providers.clear()
        self.prompts.clear_cache()
