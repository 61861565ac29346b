"""
事件處理器基類

定義 niching 迴圈中事件處理的基本接口。
"""

from abc import ABC


class EventHandler(ABC):
    """
    事件處理器基類

    NichingAlgorithm 以 on_<event_name>(**kwargs) 的方式通知處理器；
    沒有實作的事件直接忽略。
    """

    def __init__(self):
        self.name = "base_handler"
        self.algorithm = None

    def set_algorithm(self, algorithm):
        """設置 niching 演算法引用"""
        self.algorithm = algorithm

    def handle_event(self, event_name: str, **kwargs):
        """
        處理事件

        Args:
            event_name: 事件名稱
            **kwargs: 事件參數
        """
        method = getattr(self, f'on_{event_name}', None)
        if method is not None:
            method(**kwargs)

    def on_run_start(self, **kwargs):
        """執行開始事件"""
        pass

    def on_iteration_complete(self, **kwargs):
        """迭代完成事件"""
        pass

    def on_niche_created(self, **kwargs):
        """新 niche 建立事件"""
        pass

    def on_run_complete(self, **kwargs):
        """執行完成事件"""
        pass

    def on_run_error(self, **kwargs):
        """執行錯誤事件"""
        pass
