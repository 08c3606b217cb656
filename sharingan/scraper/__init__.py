"""Concurrent scoreboard crawling."""

from sharingan.scraper.crawler import CrawlResult, Fragment, ScoreboardCrawler

__all__ = ["CrawlResult", "Fragment", "ScoreboardCrawler"]
