"""
控制參數模組

控制參數是速度更新所需的純量來源，可以是常數，也可以隨著迭代次數
在兩個端點之間線性變化。每次計算速度時都會重新查詢。
"""

from abc import ABC, abstractmethod
from typing import Optional
import copy


class ControlParameter(ABC):
    """
    控制參數基類

    所有控制參數都透過 get_parameter(algorithm) 取值，
    algorithm 需提供 iterations 與 percentage_complete()。
    """

    @abstractmethod
    def get_parameter(self, algorithm=None) -> float:
        """取得目前的參數值"""
        pass

    def clone(self) -> 'ControlParameter':
        """深拷貝控制參數"""
        return copy.deepcopy(self)


class ConstantControlParameter(ControlParameter):
    """固定值控制參數"""

    def __init__(self, value: float):
        self.value = float(value)

    @classmethod
    def of(cls, value: float) -> 'ConstantControlParameter':
        return cls(value)

    def get_parameter(self, algorithm=None) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"ConstantControlParameter({self.value})"


class LinearlyVaryingControlParameter(ControlParameter):
    """
    線性變化控制參數

    根據演算法完成比例在 start 與 end 之間線性插值：
        value = start + (end - start) * percentage_complete

    沒有 algorithm 時視為完成比例 0，也就是回傳 start。
    """

    def __init__(self, start: float, end: float):
        self.start = float(start)
        self.end = float(end)

    def get_parameter(self, algorithm=None) -> float:
        percentage = 0.0 if algorithm is None else algorithm.percentage_complete()
        percentage = min(max(percentage, 0.0), 1.0)
        return self.start + (self.end - self.start) * percentage

    def __repr__(self) -> str:
        return f"LinearlyVaryingControlParameter({self.start} -> {self.end})"


class UpdateOnIterationControlParameter(ControlParameter):
    """
    每次迭代更新一次的控制參數

    包裝另一個控制參數，在同一次迭代內快取其值，
    當 algorithm.iterations 改變時才重新計算。
    """

    def __init__(self, delegate: ControlParameter):
        if not isinstance(delegate, ControlParameter):
            raise TypeError(f"delegate 必須是 ControlParameter: {type(delegate)}")
        self.delegate = delegate
        self._cached_value: Optional[float] = None
        self._cached_iteration: Optional[int] = None

    def get_parameter(self, algorithm=None) -> float:
        iteration = None if algorithm is None else algorithm.iterations
        if self._cached_value is None or iteration != self._cached_iteration:
            self._cached_value = self.delegate.get_parameter(algorithm)
            self._cached_iteration = iteration
        return self._cached_value

    def __repr__(self) -> str:
        return f"UpdateOnIterationControlParameter({self.delegate!r})"


def as_control_parameter(value) -> ControlParameter:
    """將數值轉換成常數控制參數，已是控制參數則原樣回傳"""
    if isinstance(value, ControlParameter):
        return value
    if isinstance(value, (int, float)):
        return ConstantControlParameter(value)
    raise TypeError(f"無法轉換成控制參數: {value!r}")
