"""
Niching 結果類

封裝 niching 迴圈的結果，包括每個 niche 的最佳解、每次迭代的歷史與統計信息。
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass

import pandas as pd

from .swarms import NichingSwarms


@dataclass
class NichingResult:
    """
    Niching 結果封裝類

    history 中每一筆記錄包含 iteration、sub_swarms、main_swarm_size、
    best_fitness 等鍵。
    """

    # 基本信息
    run_id: str
    config: Dict[str, Any]

    # 結果
    solutions: List[Any]  # 每個 niche 的最佳 entity
    final_swarms: NichingSwarms

    # 統計信息
    history: List[Dict[str, Any]]
    iterations_completed: int

    # 可選信息
    execution_time: Optional[float] = None  # 執行時間（秒）

    @property
    def niche_count(self) -> int:
        return len(self.final_swarms.sub_swarms)

    @property
    def best_fitness(self) -> Optional[float]:
        """所有 niche 中最佳的適應度值"""
        best = None
        for solution in self.solutions:
            if best is None or solution.is_better_than(best):
                best = solution
        if best is None or not best.social_fitness.valid:
            return None
        return best.social_fitness.values[0]

    def solution_table(self) -> pd.DataFrame:
        """每個 niche 一列：位置與適應度"""
        rows = []
        for index, solution in enumerate(self.solutions, start=1):
            fitness = solution.social_fitness
            rows.append({
                'niche': index,
                'entity_id': solution.id,
                'position': solution.best_position.tolist(),
                'fitness': fitness.values[0] if fitness.valid else None,
            })
        return pd.DataFrame(rows, columns=['niche', 'entity_id', 'position', 'fitness'])

    def to_dataframe(self) -> pd.DataFrame:
        """迭代歷史轉成 DataFrame"""
        return pd.DataFrame(self.history)

    def get_summary(self) -> Dict[str, Any]:
        """獲取結果摘要"""
        return {
            'run_id': self.run_id,
            'experiment_name': self.config.get('experiment', {}).get('name', 'Unknown'),
            'iterations_completed': self.iterations_completed,
            'niche_count': self.niche_count,
            'main_swarm_size': len(self.final_swarms.main_swarm.topology),
            'best_fitness': self.best_fitness,
            'execution_time': self.execution_time,
        }
