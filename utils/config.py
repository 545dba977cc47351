# utils/config.py
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from utils.logger import logger

BASE_DIR = Path(__file__).resolve().parents[1]


def resolve_env(obj):
    """Replace ``"${VAR}"`` leaves with the value of the environment variable."""
    if isinstance(obj, dict):
        return {k: resolve_env(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [resolve_env(v) for v in obj]
    if isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        varname = obj[2:-1]
        return os.getenv(varname, "")
    return obj


def load_cfg(cfg_path: str | None = None) -> Dict[str, Any]:

    cfg_file = Path(cfg_path) if cfg_path else (BASE_DIR / "config.yaml")

    load_dotenv(BASE_DIR / ".env")

    if not cfg_file.exists():
        logger.warning(f"Config file {cfg_file} not found, using built-in defaults")
        return {}

    with open(cfg_file, "r", encoding="utf-8") as f:
        raw_cfg = yaml.safe_load(f) or {}

    cfg = resolve_env(raw_cfg)

    llm_cfg = cfg.get("llm", {}) or {}
    if not os.getenv("OPENAI_API_KEY") and not llm_cfg.get("api_key"):
        logger.warning("OPENAI_API_KEY is not set; signal requests will fail until it is provided")

    return cfg
