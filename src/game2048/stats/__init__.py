from .statistics import SessionStats, StatisticsManager, StatisticsSummary, summarize
