#!/usr/bin/env python3
"""
Niching PSO - 統一入口點

支持通過 JSON 配置文件來配置所有 niching 參數和組件。

使用方式:
    python main_niching.py --config configs/niche_pso.json
    python main_niching.py --function himmelblau --iterations 300 --seed 7
"""

import argparse
import logging
import sys
from typing import Any, Dict

from niche_swarm import DEFAULT_CONFIG, create_niching_algorithm, deep_merge, load_config
from niche_swarm.functions import FUNCTIONS


def parse_args():
    ap = argparse.ArgumentParser(description="Niching PSO runner.")
    ap.add_argument("--config", default=None, help="JSON 配置文件路徑")
    ap.add_argument("--function", choices=sorted(FUNCTIONS.keys()), default=None)
    ap.add_argument("--dimensions", type=int, default=None)
    ap.add_argument("--iterations", type=int, default=None)
    ap.add_argument("--swarm", type=int, default=None, help="主族群大小")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--progress", action="store_true", help="顯示進度條")
    ap.add_argument("--verbose", action="store_true")
    return ap.parse_args()


def build_config(args) -> Dict[str, Any]:
    """命令列參數只在明確給出時覆寫配置"""
    config = load_config(args.config) if args.config else deep_merge(DEFAULT_CONFIG, {})
    overrides: Dict[str, Any] = {}
    if args.function is not None:
        overrides.setdefault('problem', {})['function'] = args.function
    if args.dimensions is not None:
        overrides.setdefault('problem', {})['dimension'] = args.dimensions
    if args.iterations is not None:
        overrides.setdefault('termination', {})['max_iterations'] = args.iterations
    if args.swarm is not None:
        overrides.setdefault('main_swarm', {})['size'] = args.swarm
    if args.seed is not None:
        overrides.setdefault('experiment', {})['seed'] = args.seed
    return deep_merge(config, overrides)


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ 配置錯誤: {e}")
        return 1

    algorithm = create_niching_algorithm(config)
    result = algorithm.run(show_progress=args.progress)

    print(f"\n🎯 {config['problem']['function']}: 找到 {result.niche_count} 個 niche "
          f"({result.iterations_completed} 次迭代, {result.execution_time:.2f}s)")
    table = result.solution_table()
    if not table.empty:
        print(table.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
