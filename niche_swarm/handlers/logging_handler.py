"""
日誌處理器

以固定間隔把 niching 迴圈的狀態寫入 logging。
"""

import logging

from .base import EventHandler

logger = logging.getLogger(__name__)


class LoggingHandler(EventHandler):
    """
    日誌處理器

    Args:
        log_interval: 每隔幾次迭代輸出一次摘要
    """

    def __init__(self, log_interval: int = 10):
        super().__init__()
        if log_interval < 1:
            raise ValueError(f"log_interval 必須 >= 1，得到: {log_interval}")
        self.name = "logging_handler"
        self.log_interval = log_interval
        self.niches_created = 0

    def on_run_start(self, algorithm=None, **kwargs):
        swarms = algorithm.swarms
        logger.info(f"🚀 Niching 開始: 主族群 {len(swarms.main_swarm.topology)} 個粒子")

    def on_iteration_complete(self, iteration=None, swarms=None, **kwargs):
        if iteration is None or iteration % self.log_interval != 0:
            return
        logger.info(f"🔄 第 {iteration} 次迭代: {swarms.shape()}")

    def on_niche_created(self, **kwargs):
        self.niches_created += 1

    def on_run_complete(self, result=None, **kwargs):
        logger.info(
            f"✅ Niching 完成: {result.iterations_completed} 次迭代, "
            f"{len(result.solutions)} 個 niche, 共建立 {self.niches_created} 次"
        )

    def on_run_error(self, error=None, **kwargs):
        logger.error(f"❌ Niching 執行出錯: {error}")
