"""Crawler, HTTP client, request queue, robots.txt and sitemap helpers."""