"""Reporters that check a single crawled page."""