#
# File: config.py
# Revision: 11
# Description: Reduces configuration to the file-filtering settings. Reads
# `fileFiltering` from the user and workspace settings.json files, lets CLI
# arguments override them, and builds the FileDiscoveryService lazily.
#

import argparse
import json
import logging
import os
import re
from pathlib import Path
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from services.file_discovery_service import FileDiscoveryService, FilterFilesOptions
from utils.paths import normalize_root

# --- Constants ---
SETTINGS_DIRECTORY_NAME = '.gemini'
USER_SETTINGS_DIR = Path.home() / SETTINGS_DIRECTORY_NAME
USER_SETTINGS_PATH = USER_SETTINGS_DIR / 'settings.json'
FILE_FILTERING_KEY = 'fileFiltering'


class Config:
    def __init__(self, config_dict: dict, target_dir: Optional[Path] = None):
        self._config = config_dict
        self._target_dir = normalize_root(target_dir or Path.cwd())
        self._file_service: Optional[FileDiscoveryService] = None

    def get_target_dir(self) -> Path:
        return self._target_dir

    def get_custom_ignore_file_name(self) -> Optional[str]:
        return self._config.get("custom_ignore_file_name")

    def get_file_filtering_options(self) -> FilterFilesOptions:
        return FilterFilesOptions(
            respect_git_ignore=self._config.get("respect_git_ignore", True),
            respect_gemini_ignore=self._config.get("respect_gemini_ignore", True),
        )

    def get_file_service(self) -> FileDiscoveryService:
        if self._file_service is None:
            self._file_service = FileDiscoveryService(self._target_dir, self.get_custom_ignore_file_name())
        return self._file_service

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)


def find_env_file(start_dir: Path) -> Optional[Path]:
    current_dir = start_dir.resolve()
    while True:
        gemini_env_path = current_dir / SETTINGS_DIRECTORY_NAME / '.env'
        if gemini_env_path.exists(): return gemini_env_path
        env_path = current_dir / '.env'
        if env_path.exists(): return env_path
        parent_dir = current_dir.parent
        if parent_dir == current_dir:
            home_gemini_env = Path.home() / SETTINGS_DIRECTORY_NAME / '.env'
            if home_gemini_env.exists(): return home_gemini_env
            home_env = Path.home() / '.env'
            if home_env.exists(): return home_env
            return None
        current_dir = parent_dir


def resolve_env_vars(config_obj: Any) -> Any:
    if isinstance(config_obj, dict):
        return {k: resolve_env_vars(v) for k, v in config_obj.items()}
    elif isinstance(config_obj, list):
        return [resolve_env_vars(i) for i in config_obj]
    elif isinstance(config_obj, str):
        env_var_regex = r'\$(?:(\w+)|{([^}]+)})'
        def replace_env(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))
        return re.sub(env_var_regex, replace_env, config_obj)
    return config_obj


def load_settings_file(file_path: Path) -> Dict:
    if not file_path.exists(): return {}
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = "".join(line for line in f if not line.strip().startswith('//'))
            return resolve_env_vars(json.loads(content))
    except (IOError, json.JSONDecodeError) as e:
        logging.warning(f"Could not load or parse settings from {file_path}: {e}")
        return {}


def load_and_merge_settings(workspace_dir: Path, user_settings_path: Path = USER_SETTINGS_PATH) -> Dict:
    user_settings = load_settings_file(user_settings_path)
    workspace_settings = load_settings_file(workspace_dir / SETTINGS_DIRECTORY_NAME / 'settings.json')
    merged = user_settings.copy()
    merged.update(workspace_settings)
    # fileFiltering is merged key by key so a workspace can override one switch.
    file_filtering = dict(user_settings.get(FILE_FILTERING_KEY) or {})
    file_filtering.update(workspace_settings.get(FILE_FILTERING_KEY) or {})
    if file_filtering:
        merged[FILE_FILTERING_KEY] = file_filtering
    return merged


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in ('false', '0', 'no', 'off', '')
    return bool(value)


def load_final_config(cli_args: argparse.Namespace = None, user_settings_path: Path = USER_SETTINGS_PATH) -> Config:
    args = cli_args if cli_args is not None else argparse.Namespace()
    target_dir = normalize_root(getattr(args, 'root', None) or Path.cwd())
    env_file_path = find_env_file(target_dir)
    if env_file_path:
        load_dotenv(dotenv_path=env_file_path, override=True)
        logging.info(f"Loaded environment variables from: {env_file_path}")
    settings = load_and_merge_settings(target_dir, user_settings_path)
    file_filtering = settings.get(FILE_FILTERING_KEY) or {}

    respect_git_ignore = _as_bool(file_filtering.get("respectGitIgnore"), True)
    respect_gemini_ignore = _as_bool(file_filtering.get("respectGeminiIgnore"), True)
    if getattr(args, 'no_git_ignore', False):
        respect_git_ignore = False
    if getattr(args, 'no_gemini_ignore', False):
        respect_gemini_ignore = False

    raw_config_dict = {
        "respect_git_ignore": respect_git_ignore,
        "respect_gemini_ignore": respect_gemini_ignore,
        "custom_ignore_file_name": (getattr(args, 'ignore_file', None) or file_filtering.get("customIgnoreFileName")),
    }
    return Config(raw_config_dict, target_dir)
