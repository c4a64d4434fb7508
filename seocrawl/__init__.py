"""Website crawling, WACZ archiving and single-page SEO issue reporting."""

__version__ = "0.1.0"