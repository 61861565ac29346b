"""
Niching 演算法核心類

外層迴圈：每個週期先把主族群與所有子族群各推進一次迭代，
接著偵測 niching 候選、對每個候選建立 niche，最後執行合併/吸收策略。
每個轉換都產生新的 NichingSwarms 快照。
"""

from typing import Any, Dict, List, Optional
import logging
import time
import uuid

from tqdm import tqdm

from ..algorithm.population import SinglePopulationBasedAlgorithm
from ..algorithm.stopping import StoppingCondition
from ..entity import Entity
from ..handlers.base import EventHandler
from .creation import ClosestNeighbourNicheCreationStrategy, NicheCreationStrategy
from .detection import FitnessDeviationNicheDetection, NicheDetection
from .merging import NicheMergeStrategy
from .result import NichingResult
from .swarms import NichingSwarms

logger = logging.getLogger(__name__)


class NichingAlgorithm:
    """
    Niching 演算法

    負責：
    1. 依序推進主族群與所有子族群
    2. 協調 niche 偵測與建立
    3. 執行合併/吸收策略
    4. 處理事件與停止條件
    5. 收集並回傳結果
    """

    def __init__(self,
                 main_swarm: SinglePopulationBasedAlgorithm,
                 creation_strategy: Optional[NicheCreationStrategy] = None,
                 detection: Optional[NicheDetection] = None,
                 merge_strategies: Optional[List[NicheMergeStrategy]] = None,
                 stopping_conditions: Optional[List[StoppingCondition]] = None,
                 config: Optional[Dict[str, Any]] = None):
        if not isinstance(main_swarm, SinglePopulationBasedAlgorithm):
            raise TypeError(f"主族群必須繼承自 SinglePopulationBasedAlgorithm: {type(main_swarm)}")

        self.run_id = str(uuid.uuid4())[:8]
        self.config = config or {}
        self.swarms = NichingSwarms.of(main_swarm)
        self.creation_strategy = creation_strategy or ClosestNeighbourNicheCreationStrategy()
        self.detection = detection or FitnessDeviationNicheDetection()
        self.merge_strategies: List[NicheMergeStrategy] = list(merge_strategies or [])
        self.stopping_conditions: List[StoppingCondition] = []
        for condition in stopping_conditions or []:
            self.add_stopping_condition(condition)

        # 執行狀態
        self.iterations = 0
        self.history: List[Dict[str, Any]] = []
        self.handlers: List[EventHandler] = []
        self.is_running = False
        self.should_stop = False

        logger.info(f"Niching 演算法已創建 (ID: {self.run_id})")

    def add_handler(self, handler: EventHandler):
        if not isinstance(handler, EventHandler):
            raise TypeError(f"處理器必須繼承自 EventHandler: {type(handler)}")
        self.handlers.append(handler)
        handler.set_algorithm(self)
        logger.debug(f"已添加事件處理器: {handler.__class__.__name__}")

    def add_stopping_condition(self, condition: StoppingCondition):
        if not isinstance(condition, StoppingCondition):
            raise TypeError(f"停止條件必須繼承自 StoppingCondition: {type(condition)}")
        self.stopping_conditions.append(condition)

    def _fire_event(self, event_name: str, **kwargs):
        """觸發事件，通知所有處理器"""
        for handler in self.handlers:
            try:
                handler.handle_event(event_name, **kwargs)
            except Exception as e:
                logger.error(f"事件處理器 {handler.__class__.__name__} 處理 {event_name} 事件時出錯: {e}")

    def is_finished(self) -> bool:
        return self.should_stop or any(c.is_finished(self) for c in self.stopping_conditions)

    def percentage_complete(self) -> float:
        if not self.stopping_conditions:
            return 0.0
        return max(c.percentage_complete(self) for c in self.stopping_conditions)

    def iterate(self) -> NichingSwarms:
        """
        執行一個外層週期

        Returns:
            新的 NichingSwarms 快照
        """
        swarms = self.swarms

        # 所有族群都完成這次迭代後才進行建立/合併
        for population in swarms.populations():
            population.perform_iteration()

        for candidate in self.detection.detect(swarms.main_swarm):
            before = len(swarms.sub_swarms)
            swarms = self.creation_strategy.create(swarms, candidate)
            if len(swarms.sub_swarms) > before:
                self._fire_event('niche_created',
                                 iteration=self.iterations,
                                 niche=swarms.sub_swarms[-1],
                                 candidate=candidate)

        for strategy in self.merge_strategies:
            swarms = strategy.merge(swarms)

        swarms.validate()
        self.swarms = swarms
        self.iterations += 1
        self._record_iteration_stats()

        self._fire_event('iteration_complete',
                         iteration=self.iterations,
                         swarms=swarms,
                         algorithm=self)
        return swarms

    def run(self, show_progress: bool = False) -> NichingResult:
        """
        執行直到任一停止條件成立

        Args:
            show_progress: 是否顯示 tqdm 進度條

        Returns:
            Niching 結果
        """
        if not self.stopping_conditions:
            raise ValueError("缺少停止條件")

        logger.info(f"🚀 開始 niching (ID: {self.run_id})")
        start = time.time()
        self.is_running = True
        self.should_stop = False
        self._fire_event('run_start', algorithm=self)

        progress = tqdm(desc="Niching", unit="iter", disable=not show_progress)
        try:
            while not self.is_finished():
                self.iterate()
                progress.update(1)
                progress.set_postfix(niches=len(self.swarms.sub_swarms))
        except Exception as e:
            self.is_running = False
            self._fire_event('run_error', algorithm=self, error=e)
            logger.error(f"❌ Niching 過程出錯: {e}")
            raise
        finally:
            progress.close()

        self.is_running = False
        result = NichingResult(
            run_id=self.run_id,
            config=self.config,
            solutions=self.solutions(),
            final_swarms=self.swarms,
            history=list(self.history),
            iterations_completed=self.iterations,
            execution_time=time.time() - start,
        )
        self._fire_event('run_complete', algorithm=self, result=result)
        logger.info(f"✅ Niching 完成! 找到 {result.niche_count} 個 niche")
        return result

    def solutions(self) -> List[Entity]:
        """每個子族群的最佳 entity"""
        return [best for best in (s.best_solution() for s in self.swarms.sub_swarms) if best is not None]

    def best_solution(self) -> Optional[Entity]:
        best = None
        for population in self.swarms.populations():
            candidate = population.best_solution()
            if candidate is not None and (best is None or candidate.is_better_than(best)):
                best = candidate
        return best

    def _record_iteration_stats(self):
        best = self.best_solution()
        best_fitness = best.social_fitness.values[0] if best is not None and best.social_fitness.valid else None
        self.history.append({
            'iteration': self.iterations,
            'sub_swarms': len(self.swarms.sub_swarms),
            'main_swarm_size': len(self.swarms.main_swarm.topology),
            'entities': self.swarms.size(),
            'best_fitness': best_fitness,
        })

    def stop(self):
        """停止 niching 迴圈"""
        self.should_stop = True
        logger.info("收到停止信號")

    def get_status(self) -> Dict[str, Any]:
        return {
            'run_id': self.run_id,
            'is_running': self.is_running,
            'iterations': self.iterations,
            'sub_swarms': len(self.swarms.sub_swarms),
            'main_swarm_size': len(self.swarms.main_swarm.topology),
        }
