"""depscope: JavaScript 项目依赖盘点与分析引擎"""

__version__ = "0.3.0"
