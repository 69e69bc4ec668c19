"""
Конфигурация приложения (см. settings.py).
"""
