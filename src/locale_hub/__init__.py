# src/locale_hub/__init__.py
"""
Locale-Hub：基于工作流的翻译缓存与解析引擎。

推荐通过 `locale_hub.bootstrap` 创建 DI 容器，再从容器中获取 `Coordinator`。
"""

__version__ = "1.0.0"
