# agent/llm_factory.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal, Optional, Dict, Any

from pydantic import BaseModel, Field

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI
from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.outputs import LLMResult

from utils.config import load_cfg
from utils.logger import logger

TaskType = Literal["signal", "default"]


class LLMTaskConfig(BaseModel):
    provider: Literal["openai"] = Field(default="openai")
    model: str = Field(default="gpt-4o-mini")
    temperature: float = Field(default=0.2)
    timeout: Optional[float] = Field(default=60.0)
    # Retries are the caller's decision; the desk never retries a submission.
    max_retries: int = Field(default=0)
    base_url: Optional[str] = None
    api_key: Optional[str] = None


class LLMFactoryConfig(BaseModel):
    default: LLMTaskConfig = Field(default_factory=LLMTaskConfig)
    signal: Optional[LLMTaskConfig] = None

    @staticmethod
    def from_yaml(cfg: Dict[str, Any]) -> "LLMFactoryConfig":
        llm_data = cfg.get("llm", {}) or {}

        def parse_task(name: str) -> Optional[LLMTaskConfig]:
            if not llm_data.get(name):
                return None
            data = {k: v for k, v in llm_data[name].items() if v not in (None, "")}
            return LLMTaskConfig(**data)

        return LLMFactoryConfig(
            default=parse_task("default") or LLMTaskConfig(),
            signal=parse_task("signal"),
        )

    @staticmethod
    def from_env() -> "LLMFactoryConfig":
        def _tc(prefix: str, fallback_model: str) -> LLMTaskConfig:
            return LLMTaskConfig(
                provider="openai",
                model=os.getenv(f"{prefix}_MODEL", fallback_model),
                temperature=float(os.getenv(f"{prefix}_TEMPERATURE", "0.2")),
                timeout=float(os.getenv(f"{prefix}_TIMEOUT", "60")),
                max_retries=int(os.getenv(f"{prefix}_MAX_RETRIES", "0")),
                base_url=os.getenv(f"{prefix}_BASE_URL") or None,
            )

        default = _tc("LLM_DEFAULT", os.getenv("LLM_MODEL", "gpt-4o-mini"))
        signal = _tc("LLM_SIGNAL", default.model)
        return LLMFactoryConfig(default=default, signal=signal)


class LLMFactory:
    def __init__(self, llm_cfg: Optional[LLMFactoryConfig] = None):
        self.cfg = llm_cfg or LLMFactoryConfig.from_env()

    def _task_cfg(self, task: TaskType) -> LLMTaskConfig:
        if task == "signal" and self.cfg.signal:
            return self.cfg.signal
        return self.cfg.default

    @lru_cache(maxsize=32)
    def get_chat_model(self, task: TaskType = "default") -> BaseChatModel:
        task_cfg = self._task_cfg(task)
        if task_cfg.provider == "openai":
            kwargs: Dict[str, Any] = {}
            if task_cfg.base_url:
                kwargs["base_url"] = task_cfg.base_url
            if task_cfg.api_key:
                kwargs["api_key"] = task_cfg.api_key
            logger.debug(f"Creating chat model for task={task}: {task_cfg.model}")
            return ChatOpenAI(
                model=task_cfg.model,
                temperature=task_cfg.temperature,
                timeout=task_cfg.timeout,
                max_retries=task_cfg.max_retries,
                callbacks=[LogLLMCalls()],
                **kwargs,
            )
        raise ValueError(f"Unsupported provider: {task_cfg.provider}")


_factory_singleton: Optional[LLMFactory] = None


def llm_factory(config_path: Optional[str] = None) -> LLMFactory:
    global _factory_singleton
    if _factory_singleton is not None:
        return _factory_singleton

    path = config_path or os.getenv("AGENT_CONFIG_YAML")
    if path and os.path.exists(path):
        cfg = LLMFactoryConfig.from_yaml(load_cfg(path))
    else:
        cfg = LLMFactoryConfig.from_env()

    _factory_singleton = LLMFactory(cfg)
    return _factory_singleton


def configure_llm_factory(cfg: Dict[str, Any]) -> LLMFactory:
    """Install a factory built from an already loaded config dict."""
    global _factory_singleton
    _factory_singleton = LLMFactory(LLMFactoryConfig.from_yaml(cfg))
    return _factory_singleton


def get_chat_model(task: TaskType = "default") -> BaseChatModel:
    return llm_factory().get_chat_model(task)


class LogLLMCalls(BaseCallbackHandler):
    def on_llm_start(self, serialized, prompts, **kwargs):
        logger.debug(f"[LLM START] {(serialized or {}).get('name') or (serialized or {}).get('id')}")
        for i, p in enumerate(prompts, 1):
            logger.debug(f"--- Prompt {i} ---\n{p}")

    def on_chat_model_start(self, serialized, messages, **kwargs):
        logger.debug(f"[CHAT START] {(serialized or {}).get('name')} batches={len(messages)}")

    def on_llm_end(self, response: LLMResult, **kwargs):
        logger.debug(f"[LLM END] generations: {len(response.generations)}")
        logger.debug(f"[LLM TOKEN USAGE] {getattr(response, 'llm_output', {})}")

    def on_llm_error(self, error, **kwargs):
        logger.warning(f"[LLM ERROR] {error}")
