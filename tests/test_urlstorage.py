import threading

from seocrawl.crawler.urlstorage import URLStorage


def test_url_storage():
    storage = URLStorage()
    url = "http://example.com"

    assert storage.seen(url) is False

    storage.add(url)
    assert storage.seen(url) is True

    assert url in set(storage)


def test_add_twice_keeps_one_entry():
    storage = URLStorage()
    storage.add("http://example.com/a")
    storage.add("http://example.com/a")
    storage.add("http://example.com/b")
    assert sorted(storage) == ["http://example.com/a", "http://example.com/b"]
    assert len(storage) == 2


def test_contains():
    storage = URLStorage()
    storage.add("http://example.com/a")
    assert "http://example.com/a" in storage
    assert "http://example.com/b" not in storage


def test_iteration_allows_adding_during_loop():
    storage = URLStorage()
    storage.add("http://example.com/a")
    for url in storage:
        storage.add(url + "/child")
    assert storage.seen("http://example.com/a/child") is True


def test_concurrent_adds():
    storage = URLStorage()

    def worker(offset):
        for i in range(100):
            storage.add(f"http://example.com/{offset}/{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(storage) == 400