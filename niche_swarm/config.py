"""
配置模組

預設配置與 JSON 配置文件載入。配置文件只需要寫出要覆寫的部分，
載入時會遞迴合併到 DEFAULT_CONFIG 之上。
"""

from pathlib import Path
from typing import Any, Dict, Union
import copy
import json
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'experiment': {
        'name': 'niche_pso',
        'seed': 42,
    },
    'problem': {
        'function': 'himmelblau',
        'dimension': 2,
        'bounds': None,  # None 表示使用函數的預設搜尋域
        'minimise': True,
    },
    'main_swarm': {
        'size': 30,
        'neighbourhood': 'gbest',
        'ring_k': 2,
        'boundary': 'clamping',
        'initial_velocity_fraction': 0.0,
        # 主族群只使用認知項 (social = 0)
        'velocity': {
            'inertia_start': 0.7,
            'inertia_end': 0.2,
            'social': 0.0,
            'cognitive': 1.2,
            'vmax': 1.0,
        },
    },
    'niche': {
        'strategy': 'closest_neighbour',
        'parameters': {
            'inertia_start': 0.7,
            'inertia_end': 0.2,
            'social': 1.2,
            'cognitive': 1.2,
            'vmax': 1.0,
            'rho': 0.01,
            'max_iterations': 500,
        },
    },
    'detection': {
        'method': 'fitness_deviation',
        'parameters': {
            'threshold': 1e-4,
            'window': 3,
        },
    },
    'merge': {
        'enabled': True,
        'method': 'radius_overlap',
        'parameters': {
            'threshold': 1e-3,
        },
    },
    'absorption': {
        'enabled': True,
    },
    'termination': {
        'max_iterations': 200,
        'stagnation_patience': None,
        'stagnation_min_delta': 0.0,
    },
    'logging': {
        'enabled': True,
        'log_interval': 10,
    },
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """遞迴合併兩個字典，override 優先，回傳新字典"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    載入配置文件

    Args:
        config_path: 配置文件路徑

    Returns:
        與預設配置合併後的配置字典

    Raises:
        FileNotFoundError: 配置文件不存在
        ValueError: 配置文件不是 JSON 物件
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"配置文件必須是 JSON 物件: {config_path}")

    config = deep_merge(DEFAULT_CONFIG, raw)
    logger.info(f"📄 配置載入成功: {config['experiment']['name']}")
    return config
