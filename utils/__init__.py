"""
Модуль: `utils/__init__.py`.
Назначение: Вспомогательные модули обработки изображений и цветов.
"""
