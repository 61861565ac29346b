"""
基準目標函數

提供幾個常用於 niching 實驗的連續函數，以及名稱到函數與預設搜尋域的對照表。
"""

import numpy as np


def sphere(x):
    x = np.asarray(x, dtype=np.float64)
    return float(np.dot(x, x))


def rastrigin(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    n = x.size
    return float(10 * n + np.sum(x ** 2 - 10 * np.cos(2 * np.pi * x)))


def himmelblau(x: np.ndarray) -> float:
    """二維 Himmelblau 函數，有四個全域最小值 (f = 0)"""
    x = np.asarray(x, dtype=np.float64)
    if x.size != 2:
        raise ValueError(f"himmelblau 只接受二維輸入，得到: {x.size}")
    a, b = x
    return float((a ** 2 + b - 11) ** 2 + (a + b ** 2 - 7) ** 2)


def hef9_g(x: np.ndarray) -> float:
    """
    HEF9 動態多目標測試問題的 g 函數

        g(x) = 2 - |x_1|^2 + (2 / K) * sum_{k odd} (x_k - sin(6*pi*|x_1| + k*pi/n))^2

    其中 k 取 1, 3, 5, ...（0-based 索引），K 為被加總的項數。
    """
    x = np.asarray(x, dtype=np.float64)
    n = x.size
    value = abs(x[0])
    k = np.arange(1, n, 2)
    if k.size == 0:
        return float(2.0 - value ** 2)
    total = np.sum((x[k] - np.sin(6.0 * np.pi * value + k * np.pi / n)) ** 2)
    return float(total * 2.0 / k.size + 2.0 - value ** 2)


FUNCTIONS = {
    "sphere":     {"f": sphere,     "bounds": (-5.12, 5.12)},
    "rastrigin":  {"f": rastrigin,  "bounds": (-5.12, 5.12)},
    "himmelblau": {"f": himmelblau, "bounds": (-6.0, 6.0), "dimension": 2},
    "hef9_g":     {"f": hef9_g,     "bounds": (-1.0, 1.0)},
}
