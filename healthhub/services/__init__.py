"""
Services Package

The HealthAPI facade and patient analytics.
"""
from .api import APIResponse, HealthAPI, to_jsonable
from .analytics import Timeframe, Trend, calculate_health_analytics, calculate_trend
