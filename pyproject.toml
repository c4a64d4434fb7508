[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "seocrawl"
version = "0.1.0"
description = "Website crawler and SEO auditing toolkit: robots.txt and sitemap handling, WACZ archiving and page issue reporters."
requires-python = ">=3.11"
keywords = ["seo", "crawler", "robots.txt", "sitemap", "wacz", "warc", "audit"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Site Management",
    "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
    "Typing :: Typed",
]
dependencies = [
    "requests>=2.28",
    "defusedxml>=0.7",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "lxml>=4.9",
]

[tool.hatch.build.targets.wheel]
packages = ["seocrawl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
ignore_missing_imports = true
