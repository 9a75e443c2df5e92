from news_hooks.sampler import dedupe_by_url, sample_batch
from tests.helpers import make_article


def test_dedupe_keeps_first_occurrence():
    first = make_article("https://a.com/1", domain="a.com", title="first")
    dup = make_article("https://a.com/1", domain="b.com", title="second")
    other = make_article("https://a.com/2", domain="a.com")

    unique = dedupe_by_url([first, dup, other])

    assert [a.title for a in unique] == ["first", other.title]


def test_per_domain_cap_preserves_feed_order():
    articles = [make_article(f"https://big.com/{i}", domain="big.com") for i in range(8)]
    articles.append(make_article("https://small.com/1", domain="small.com"))

    batch = sample_batch(articles, per_domain=3, batch_size=30)

    assert [a.url for a in batch] == [
        "https://big.com/0", "https://big.com/1", "https://big.com/2", "https://small.com/1",
    ]


def test_sampler_caps_per_domain_and_total():
    articles = [
        make_article(f"https://d{d}.com/{i}", domain=f"d{d}.com")
        for d in range(15)
        for i in range(6)
    ]

    batch = sample_batch(articles, per_domain=3, batch_size=30)

    assert len(batch) == 30
    per_domain = {}
    for a in batch:
        per_domain[a.domain] = per_domain.get(a.domain, 0) + 1
    assert max(per_domain.values()) <= 3
    assert list(per_domain) == [f"d{d}.com" for d in range(10)]


def test_duplicates_do_not_use_domain_slots():
    articles = [make_article("https://a.com/1", domain="a.com")] * 5
    articles += [make_article(f"https://a.com/{i}", domain="a.com") for i in range(2, 4)]

    batch = sample_batch(articles)

    assert [a.url for a in batch] == ["https://a.com/1", "https://a.com/2", "https://a.com/3"]


def test_empty_input():
    assert sample_batch([]) == []
