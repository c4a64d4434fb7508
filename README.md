# seocrawl

A toolkit for crawling a website and checking its pages for common SEO
problems.

## What it provides

- **A concurrent crawler**: `seocrawl.crawler.crawler.Crawler`. It works
  through a FIFO request queue (`RequestQueue`) with two worker threads. It
  respects `robots.txt` unless told otherwise and discovers sitemaps. Every
  response goes to a callback as a `ResponseMessage`. It stays on the start
  domain and its `www.` twin. Subdomains are allowed only when
  `CrawlerOptions.allow_subdomains` is set.
- **An HTTP client**: `seocrawl.crawler.basic_client.BasicClient`. It sends a
  fixed User-Agent and adds HTTP basic authentication only for the hosts listed
  in `ClientOptions.basic_auth_domains`. It also records the time a request
  took.
- **robots.txt and sitemap helpers**:
  - `seocrawl.crawler.robots_checker.RobotsChecker`
  - `seocrawl.crawler.sitemap_checker.SitemapChecker`
- **A WACZ archiver**: `seocrawl.archiver.writer.Archiver`. It stores HTTP
  responses as WARC records inside a WACZ file. On close it adds a CDXJ index,
  a pages list, `datapackage.json` and `datapackage-digest.json`.
  `seocrawl.archiver.reader.ArchiveReader` gets a stored record back by URL.
- **Single-page issue reporters** in `seocrawl.issues.page`, covering canonical
  tags, content, depth, meta descriptions, forms and headings. Each reporter
  is a `PageIssueReporter` tagged with a member of
  `seocrawl.issues.issue_types.ErrorType`.

## Crawling

The crawler does not extract links from pages. The response callback decides
what to queue next by calling `add_request`. That call raises `AlreadyVisited`,
`DomainNotAllowed` or `BlockedByRobotsTxt`, all subclasses of `CrawlerError`,
when a URL is refused.

```python
from seocrawl.crawler.basic_client import BasicClient, ClientOptions
from seocrawl.crawler.crawler import Crawler, CrawlerOptions
from seocrawl.crawler.messages import RequestMessage

client = BasicClient(ClientOptions(user_agent="seocrawl-bot"))
crawler = Crawler(
    "https://example.com/",
    CrawlerOptions(crawl_limit=100, crawl_sitemap=True),
    client,
)

def on_response(message):
    if message.error is not None:
        print(message.url, "failed:", message.error)
    else:
        print(message.url, message.response.status_code, message.ttfb, "ms")

crawler.on_response(on_response)
crawler.add_request(RequestMessage(url="https://example.com/"))
crawler.start()  # blocks until the crawl ends, the limit is hit or stop() is called
print(crawler.status())
```

How the crawl behaves:

- When `crawl_sitemap` is set, the URLs listed in the site's sitemaps are
  queued as well.
- Before each request the crawler waits a random delay of up to 1.5 seconds.
  The `max_delay` keyword argument changes this.
- A crawl stops after two hours at most. The `timeout` keyword argument
  changes this.

## Checking a single page

A reporter is called with three things:

- a `PageReport`;
- the parsed document, which is any element with an `xpath` method, such as an
  lxml tree;
- the response headers.

It returns `True` when the page has the issue.

```python
from lxml import html  # install lxml separately

from seocrawl.issues.page.base import PageReport
from seocrawl.issues.page.headings import new_valid_headings_order_reporter

reporter = new_valid_headings_order_reporter()
report = PageReport(crawled=True, media_type="text/html", status_code=200)
document = html.fromstring("<html><body><h1>A</h1><h3>C</h3></body></html>")

if reporter(report, document, {}):
    print("issue:", reporter.error_type.name)
```

## Archiving responses

`Archiver.add_record` takes a `requests.Response` and returns its `IndexEntry`.
`ArchiveReader.read_archive` returns the stored record content, which is the
HTTP status line, the headers and the body. It returns `""` when the URL is not
in the archive.

```python
import requests

from seocrawl.archiver.reader import ArchiveReader
from seocrawl.archiver.writer import Archiver

with Archiver("archive/site.wacz") as archiver:
    archiver.add_record(requests.get("https://example.com/"))

record = ArchiveReader("archive/site.wacz").read_archive("https://example.com/")
```

## Configuration

`seocrawl.config.load_config("config")` reads `config.toml`, or the bare path
`config` if there is no `config.toml`. It returns a `Config` with three parts:
`crawler`, `http_server` and `db`.

```toml
[crawler]
agent = "seocrawl-bot"

[server]
host = "localhost"
port = 9000
url = "http://localhost:9000"

[database]
server = "localhost"
port = 3306
user = "user"
password = "password"
database = "seocrawl"
```

## What it does not do

This package is a library. It has no command-line program and no web server. It
does not store crawl results in a database. The `server` and `database`
configuration settings are read, but nothing in the package uses them. Issues
that depend on several pages at once are not detected; examples are duplicate
titles, redirect chains and orphan pages. Only the single-page reporters above
are included.

## Running the tests

Install the `test` extra and run `pytest` from the project root.